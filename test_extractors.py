import unittest

import pytest

from checklist import DEFAULT_CHECKLIST
from extractors import build_canonical_model, clean_narrative, split_attach_prompt, strip_requirement_echo


class TestCleanNarrative(unittest.TestCase):

    def test_cuts_after_last_marker_occurrence(self):
        text = "Provider Name: Old. Provider Name - Example University"
        self.assertEqual(clean_narrative(text, ["Provider Name"]), "Example University")

    def test_markers_applied_in_order(self):
        text = "Describe how these plans assure you that the requirement is/will be met: Intake is 80 students."
        markers = ["how these plans assure you that the requirement is/will be met", "intake"]
        self.assertEqual(clean_narrative(text, markers), "is 80 students.")

    def test_no_marker_only_strips_leading_punctuation(self):
        self.assertEqual(clean_narrative(" :– We supervise.", ["absent"]), "We supervise.")

    def test_empty(self):
        self.assertEqual(clean_narrative(None, ["x"]), "")


class TestSplitAttachPrompt(unittest.TestCase):

    def test_truncates_before_prompt(self):
        narrative, found = split_attach_prompt("We log incidents. Please ATTACH  evidence here.", r"attach\s+evidence")
        self.assertEqual(narrative, "We log incidents. Please")
        self.assertTrue(found)

    def test_no_prompt(self):
        self.assertEqual(split_attach_prompt("Plain.", r"attach\s+evidence"), ("Plain.", False))


def test_single_line_scenario_has_full_canonical_set():
    model = build_canonical_model("Q1 Provider Name: Example University. Q2 Full title: BDS.")
    assert len(model.questions) == 15
    assert [q.id for q in model.questions] == [f"Q{i}" for i in range(1, 16)]
    q1, q2 = model.questions[0], model.questions[1]
    assert q1.detected and q2.detected
    assert q1.stem == "Provider Name: Example University."
    assert q2.stem == "Full title: BDS."
    for q in model.questions[2:]:
        assert q.detected is False
        assert q.stem == f"{q.id} (not detected in extracted text)"
        assert q.answer_text == ""
    assert len(model.requirements) == 21
    assert not any(r.detected for r in model.requirements)


def test_question_types_follow_checklist():
    model = build_canonical_model("")
    types = {q.id: q.type for q in model.questions}
    assert types["Q1"] == "extraction"
    assert types["Q10"] == "extraction"
    assert types["Q5"] == "analysis"


@pytest.mark.parametrize("text", [None, "", "   ", "no headers at all"])
def test_never_drops_ids(text):
    model = build_canonical_model(text)
    assert len(model.questions) == DEFAULT_CHECKLIST.question_count
    assert len(model.requirements) == DEFAULT_CHECKLIST.requirement_count


def test_requirement_narrative_and_attach_prompt(small_checklist, sample_submission):
    model = build_canonical_model(sample_submission.extracted_text, small_checklist)
    r1 = model.requirement("R1")
    assert r1.detected
    assert r1.attach_evidence_prompt_detected
    assert r1.provider_narrative.endswith("one supervisor to four students.")
    assert "rota.pdf" not in r1.provider_narrative
    assert r1.requirement_text == "Students must be supervised appropriately."
    r2 = model.requirement("R2")
    assert r2.provider_narrative == "Patient consent is recorded in the health record before treatment."
    assert not r2.attach_evidence_prompt_detected


def test_headers_outside_small_checklist_are_ignored(small_checklist):
    model = build_canonical_model("Q7 Not in this checklist\nRequirement 3 Nor this", small_checklist)
    assert [q.id for q in model.questions] == ["Q1", "Q2", "Q3"]
    assert not any(q.detected for q in model.questions)
    assert not any(r.detected for r in model.requirements)


def test_synthetic_stem_for_bare_header():
    model = build_canonical_model("Q4\nUniversity of Somewhere")
    q4 = model.questions[3]
    assert q4.detected
    assert q4.stem == "Question 4"
    assert q4.answer_text == "University of Somewhere"


def test_empty_narrative_after_truncation():
    model = build_canonical_model("Requirement 5 Attach evidence: list.xlsx")
    r5 = model.requirement("R5")
    assert r5.detected
    assert r5.provider_narrative == ""
    assert r5.attach_evidence_prompt_detected


def test_boilerplate_stripped_by_default():
    text = ("Requirement 2 Please describe how these plans assure you that the requirement is/will be met. "
            "Consent is recorded before treatment.")
    stripped = build_canonical_model(text).requirement("R2")
    kept = build_canonical_model(text, strip_boilerplate=False).requirement("R2")
    assert stripped.provider_narrative == "Consent is recorded before treatment."
    assert kept.provider_narrative.startswith("Please describe")


def test_unanswered_template_block_has_empty_narrative():
    template = DEFAULT_CHECKLIST.canonical_requirement_texts[0]
    text = ("Requirement 1\n" + template + " Describe, in detail, your plans and how these plans assure "
            "you that the requirement is/will be met.\nAttach evidence")
    r1 = build_canonical_model(text).requirement("R1")
    assert r1.detected
    assert r1.attach_evidence_prompt_detected
    assert r1.provider_narrative == ""


def test_requirement_echo_removed():
    echo = "Patient consent must be recorded."
    block = "Patient consent  must be recorded.  We record consent on the treatment plan."
    assert strip_requirement_echo(block, echo) == "We record consent on the treatment plan."
    assert strip_requirement_echo("We record consent.", echo) == "We record consent."
    assert strip_requirement_echo("", echo) == ""


def test_page_markers_and_carriage_returns_removed():
    model = build_canonical_model("Q5 Duration\r\n[PAGE 2]\r\nFive   years")
    assert model.questions[4].answer_text == "Five years"


def test_idempotent():
    text = "Q1 Provider: A.\nRequirement 1 We do it.\nQ1 Provider: B."
    assert build_canonical_model(text) == build_canonical_model(text)
