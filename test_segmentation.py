import unittest

from segmentation import segment


class TestSegment(unittest.TestCase):

    def test_splits_on_terminal_punctuation_before_capital_or_digit(self):
        text = "Hello world. This is two.\r\nThree here? yes lower. Done"
        sentences = segment(text)
        self.assertEqual([s.text for s in sentences],
                         ["Hello world.", "This is two.", "Three here? yes lower.", "Done"])
        self.assertEqual([s.ordinal for s in sentences], [1, 2, 3, 4])
        self.assertEqual(sentences[2].location, "Sentence 3")

    def test_digit_starts_new_sentence(self):
        sentences = segment("Ratios were checked! 4 clinics failed.")
        self.assertEqual(len(sentences), 2)
        self.assertEqual(sentences[1].text, "4 clinics failed.")

    def test_no_split_inside_numbers(self):
        self.assertEqual(len(segment("Version 2.5 was released in 2023.")), 1)

    def test_empty_inputs(self):
        self.assertEqual(segment(""), [])
        self.assertEqual(segment("   \n\t "), [])
        self.assertEqual(segment(None), [])

    def test_ordinals_contiguous_after_dropping_empties(self):
        sentences = segment("One.   \n\n   Two.")
        self.assertEqual([s.ordinal for s in sentences], [1, 2])

    def test_deterministic(self):
        text = "Students are supervised. Ratios are 1:4! Is consent recorded? Yes."
        self.assertEqual(segment(text), segment(text))


if __name__ == "__main__":
    unittest.main()
