import dataclasses
import math
import unittest
from unittest import mock

from lexical_index import build_index, score_entry, search
from models import SourceDocument
from settings import AnalysisSettings


def doc(doc_id, text):
    return SourceDocument(id=doc_id, name=f"{doc_id}.txt", extracted_text=text)


class TestBuildIndex(unittest.TestCase):

    def test_short_sentences_dropped(self):
        index = build_index([doc("a", "Too short. This sentence is comfortably long enough.")])
        self.assertEqual(len(index), 1)
        self.assertEqual(index.entries[0].location, "Sentence 2")
        self.assertEqual(index.total_docs, 1)

    def test_document_frequency_counts_sentences(self):
        index = build_index([doc("a", "Supervision is provided daily. Supervision records are kept.")])
        self.assertEqual(index.doc_freq["supervision"], 2)
        self.assertEqual(index.doc_freq["daily"], 1)

    def test_tokens_lowercased_and_short_tokens_removed(self):
        index = build_index([doc("a", "The Ratio is 1:4 for ALL clinics.")])
        self.assertEqual(index.entries[0].tokens, ("the", "ratio", "for", "all", "clinics"))

    def test_index_is_immutable(self):
        index = build_index([doc("a", "Supervision is provided daily in clinics.")])
        with self.assertRaises(TypeError):
            index.doc_freq["new"] = 1
        with self.assertRaises(dataclasses.FrozenInstanceError):
            index.total_docs = 5

    def test_rebuild_is_deterministic(self):
        corpus = [doc("a", "Supervision is provided daily in clinics."), doc("b", "Consent is recorded for patients.")]
        self.assertEqual(build_index(corpus), build_index(corpus))

    def test_min_sentence_length_is_configurable(self):
        settings = AnalysisSettings(min_reference_sentence_chars=5)
        index = build_index([doc("a", "Too short. This sentence is comfortably long enough.")], settings)
        self.assertEqual(len(index), 2)


class TestSearch(unittest.TestCase):

    def test_supervision_ratio_scenario(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4.")])
        hits = search(index, "supervision ratio", top_n=5)
        self.assertEqual(len(hits), 1)
        self.assertGreater(hits[0].relevance_score, 0)
        # 2 of 5 tokens matched, each with idf ln(1 + 1/1)
        expected = round((2 / 5) * 2 * math.log(2), 4)
        self.assertEqual(hits[0].relevance_score, expected)
        self.assertEqual(hits[0].location, "Sentence 1")
        self.assertEqual(hits[0].source_doc_name, "a.txt")

    def test_empty_corpus(self):
        self.assertEqual(search(build_index([]), "supervision ratio"), [])

    def test_index_with_no_usable_sentences(self):
        index = build_index([doc("a", "Short. Tiny.")])
        self.assertEqual(index.total_docs, 1)
        self.assertEqual(len(index), 0)
        self.assertTrue(index.is_empty)
        with mock.patch("lexical_index.tokenize") as tokenize:
            self.assertEqual(search(index, "short tiny"), [])
        tokenize.assert_not_called()

    def test_repeated_search_is_stable(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4."),
                             doc("b", "Supervision rotas are published for every clinic session.")])
        first = search(index, "supervision ratio clinic")
        self.assertTrue(first)
        self.assertEqual(first, search(index, "supervision ratio clinic"))

    def test_empty_or_unusable_query(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4.")])
        self.assertEqual(search(index, ""), [])
        self.assertEqual(search(index, None), [])
        self.assertEqual(search(index, "a an of"), [])

    def test_no_match(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4.")])
        self.assertEqual(search(index, "library opening hours"), [])

    def test_sorted_descending_and_top_n(self):
        corpus = [doc("a", (
            "Supervision is described in the clinical handbook for all students. "
            "Supervision ratio policy is set by the clinical director annually. "
            "Supervision ratio policy applies."
        ))]
        index = build_index(corpus)
        hits = search(index, "supervision ratio policy", top_n=2)
        self.assertEqual(len(hits), 2)
        self.assertGreaterEqual(hits[0].relevance_score, hits[1].relevance_score)
        self.assertEqual(hits[0].excerpt, "Supervision ratio policy applies.")

    def test_ties_keep_insertion_order(self):
        sentence = "Consent forms are recorded for every patient."
        index = build_index([doc("first", sentence), doc("second", sentence)])
        hits = search(index, "consent recorded")
        self.assertEqual([h.source_doc_name for h in hits], ["first.txt", "second.txt"])
        self.assertEqual(hits[0].relevance_score, hits[1].relevance_score)

    def test_confidence_capped(self):
        corpus = [
            doc("a", "Supervision ratio policy applies here."),
            doc("b", "Nothing relevant in this reference text."),
            doc("c", "Another unrelated reference sentence exists."),
        ]
        hits = search(build_index(corpus), "supervision ratio policy applies here")
        self.assertGreater(hits[0].relevance_score, 0.95)
        self.assertEqual(hits[0].confidence, 0.95)

    def test_score_monotonic_in_matched_tokens(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4.")])
        entry = index.entries[0]
        one = score_entry(index, entry, ["supervision"])
        two = score_entry(index, entry, ["supervision", "ratio"])
        self.assertGreater(two, one)
        self.assertEqual(score_entry(index, entry, ["unrelated"]), 0.0)

    def test_repeated_query_tokens_count_once(self):
        index = build_index([doc("a", "The supervision ratio of staff to students is 1:4.")])
        self.assertEqual(search(index, "supervision supervision")[0].relevance_score,
                         search(index, "supervision")[0].relevance_score)


if __name__ == "__main__":
    unittest.main()
