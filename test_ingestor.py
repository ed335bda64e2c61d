import unittest

from ingestor import (
    QUESTION_CONFIDENCE,
    REQUIREMENT_CONFIDENCE,
    best_paragraph,
    ingest_program_document,
    split_paragraphs,
    title_keywords,
)
from models import SourceDocument

PROGRAMME = (
    "Example University Dental School offers a five year BDS.\r\n\r\n"
    "Programme format: two pre-clinical years followed by three clinical years.\n\n\n"
    "Appropriate supervision is provided by registered staff at a ratio of one to four.\n\n"
    "The library opens at nine."
)


class TestHelpers(unittest.TestCase):

    def test_split_paragraphs(self):
        paras = split_paragraphs(PROGRAMME)
        self.assertEqual(len(paras), 4)
        self.assertTrue(paras[1].startswith("Programme format"))
        self.assertEqual(split_paragraphs("  \n\n "), [])

    def test_title_keywords(self):
        self.assertEqual(title_keywords("Student's  Fitness to Practise - Policy", 5),
                         ["students", "fitness", "to", "practise"])
        self.assertEqual(title_keywords(None, 5), [])

    def test_best_paragraph_earliest_wins_ties(self):
        paras = ["supervision here", "supervision there", "nothing"]
        self.assertEqual(best_paragraph(paras, ["supervision"]), "supervision here")
        self.assertIsNone(best_paragraph(paras, ["consent"]))


class TestIngestProgramDocument(unittest.TestCase):

    def test_infers_matching_slots(self):
        doc = SourceDocument(id="prog", name="programme.txt", extracted_text=PROGRAMME)
        result = ingest_program_document(doc)

        self.assertEqual(result.document_id, "prog")
        self.assertTrue(result.inferred["R4"].startswith("Appropriate supervision"))
        self.assertEqual(result.confidence["R4"], REQUIREMENT_CONFIDENCE)
        self.assertTrue(result.inferred["Q6"].startswith("Programme format"))
        self.assertEqual(result.confidence["Q6"], QUESTION_CONFIDENCE)
        self.assertNotIn("Q1", result.inferred)
        self.assertEqual(result.confidence["Q1"], 0.0)

    def test_every_slot_has_a_confidence(self):
        doc = SourceDocument(id="prog", name="programme.txt", extracted_text="Nothing relevant.")
        result = ingest_program_document(doc)
        self.assertEqual(len(result.confidence), 36)
        self.assertTrue(all(0.0 <= c <= 0.95 for c in result.confidence.values()))
        for item_id, text in result.inferred.items():
            self.assertGreater(result.confidence[item_id], 0)
            self.assertTrue(text)

    def test_empty_document(self):
        empty = ingest_program_document(SourceDocument(id="e", name="e.txt", extracted_text="  "))
        self.assertEqual(empty.inferred, {})
        self.assertEqual(empty.confidence, {})
        self.assertEqual(ingest_program_document(None).inferred, {})


def test_slots_follow_checklist(small_checklist):
    doc = SourceDocument(id="p", name="p.txt", extracted_text="Patient consent is recorded.\n\nOther text.")
    result = ingest_program_document(doc, small_checklist)
    assert sorted(result.confidence) == ["Q1", "Q2", "Q3", "R1", "R2"]
    assert result.inferred == {"R2": "Patient consent is recorded."}


if __name__ == "__main__":
    unittest.main()
