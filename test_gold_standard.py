import pytest

from assessment.curated_templates import CURATED_TEMPLATES
from assessment.fallback_template import GENERIC
from assessment.gold_standard import (
    UNSPECIFIED_ID,
    benchmark_keyword,
    find_benchmark,
    generate_for_requirement,
    generate_gold_standard,
    normalize_item_id,
    with_benchmark,
)
from assessment.template_base import ThemeRegistry
from checklist import DEFAULT_CHECKLIST
from models import Requirement, SourceDocument


def assert_well_formed(gs):
    assert gs.principle.strip()
    assert 3 <= len(gs.practical_controls) <= 5
    assert all(c.strip() for c in gs.practical_controls)
    assert gs.example_wording.strip()
    assert len(gs.example_wording) > len(gs.principle)
    assert len(gs.principle) < 500


@pytest.mark.parametrize("req_id,word", [
    ("R1", "competent"),
    ("R2", "consent"),
    ("R4", "supervision"),
    ("R7", "safety"),
    ("R9", "curriculum"),
    ("R16", "assessment"),
])
def test_curated_principles(req_id, word):
    gs = generate_gold_standard(req_id)
    assert word in gs.principle.lower()
    assert gs.template_family == "curated"


@pytest.mark.parametrize("raw,expected", [
    ("r1", "R1"),
    ("  R4 ", "R4"),
    (7, "R7"),
    ("Requirement 1", "R1"),
    ("Question 6", "Q6"),
    ("q13", "Q13"),
    ("Some text with Requirement 7 mentioned", "R7"),
    ("R01", "R1"),
    ("other", "OTHER"),
    (None, UNSPECIFIED_ID),
    ("", UNSPECIFIED_ID),
])
def test_normalize_item_id(raw, expected):
    assert normalize_item_id(raw) == expected


def test_curated_lookup_uses_normalised_id():
    assert generate_gold_standard(" r1 ").principle == generate_gold_standard("R1").principle
    assert generate_gold_standard("Requirement 4").requirement_id == "R4"


def test_curated_returned_verbatim_even_with_program_text():
    plain = generate_gold_standard("R2")
    reinforced = generate_gold_standard("R2", "anything", "We audit consent and run training.")
    assert plain.practical_controls == reinforced.practical_controls


@pytest.mark.parametrize("description,family", [
    ("Students must have adequate supervision at all times", "theme:supervision"),
    ("Clinical oversight arrangements", "theme:supervision"),
    ("Examinations and assessment of students", "theme:assessment"),
    ("Patient safety incidents are recorded", "theme:patient-safety"),
    ("Patients are kept safe.", "theme:patient-safety"),
    ("Patients are kept safe", "theme:patient-safety"),
    ("Curriculum review process", "theme:curriculum"),
    ("Delivery of the program.", "theme:curriculum"),
    ("Program, placements and timetable", "theme:curriculum"),
    ("Quality assurance of placements", "theme:quality"),
    ("Financial arrangements of the school", "generic"),
])
def test_theme_cascade(description, family):
    gs = generate_gold_standard("R99", description)
    assert gs.template_family == family
    assert_well_formed(gs)


def test_first_theme_wins():
    gs = generate_gold_standard("R99", "Supervision of assessment in patient care")
    assert gs.template_family == "theme:supervision"


def test_assessment_theme_controls_mention_assessment():
    gs = generate_gold_standard("R98", "Assessment and examination arrangements")
    assert any("assess" in c.lower() for c in gs.practical_controls)


def test_generic_without_description():
    gs = generate_gold_standard("R3")
    assert gs.template_family == "generic"
    assert gs.principle == GENERIC.principle


def test_none_still_well_formed():
    gs = generate_gold_standard(None)
    assert gs.requirement_id == UNSPECIFIED_ID
    assert_well_formed(gs)
    assert_well_formed(generate_for_requirement(None))


def test_program_text_adds_one_reinforcement():
    base = generate_gold_standard("R30", "Quality management")
    reinforced = generate_gold_standard("R30", "Quality management", "We AUDIT the process and provide training.")
    assert reinforced.template_family == base.template_family
    assert len(reinforced.practical_controls) == len(base.practical_controls) + 1
    assert "audit" in reinforced.practical_controls[-1].lower()
    assert_well_formed(reinforced)


def test_every_template_well_formed():
    for key in CURATED_TEMPLATES:
        assert_well_formed(generate_gold_standard(key))
    for name in ThemeRegistry.names():
        gs = generate_gold_standard("R50", name.replace("-", " "), "audit and training")
        assert_well_formed(gs)
    for req in DEFAULT_CHECKLIST.requirements:
        assert_well_formed(generate_for_requirement(req, "audit"))


def test_generate_for_requirement_uses_title_and_description():
    req = Requirement(id=40, standard=1, title="Examiner Training", description="")
    assert generate_for_requirement(req).template_family == "theme:assessment"


def test_string_ids_pick_family():
    assert generate_gold_standard("r1").template_family == "curated"
    assert generate_gold_standard("Requirement 3", "Patient safety in clinics").template_family == "theme:patient-safety"
    assert generate_gold_standard(12).template_family == "generic"


def test_benchmark_keyword():
    assert benchmark_keyword("Appropriate Supervision") == "supervision"
    assert benchmark_keyword("Q&A") is None
    assert benchmark_keyword(None) is None


def test_benchmark_prefers_inspection_report(reference_corpus):
    handbook, report = reference_corpus[1], reference_corpus[0]
    source, excerpt = find_benchmark("consent", [handbook, report])
    assert source == "inspection_report.txt"
    assert excerpt == "consent records held in the patient notes."
    assert find_benchmark("library", [handbook, report]) is None
    assert find_benchmark("consent", []) is None


def test_benchmark_excerpt_is_capped():
    doc = SourceDocument(id="d", name="notes.txt", extracted_text="Audit\n\n" + "x " * 400)
    _, excerpt = find_benchmark("audit", [doc])
    assert excerpt.startswith("Audit x x")
    assert len(excerpt) <= 300


def test_requirement_guidance_carries_benchmark(small_checklist, reference_corpus):
    gs = generate_for_requirement(small_checklist.requirement_by_id(1), None, reference_corpus)
    assert gs.benchmark_source == "inspection_report.txt"
    assert gs.benchmark.startswith("supervision ratio of staff")
    assert 'Benchmark (from inspection_report.txt): "...supervision' in gs.as_text()
    assert_well_formed(gs)


def test_no_benchmark_without_match(reference_corpus):
    gold = generate_gold_standard("R12")
    assert with_benchmark(gold, "Raising Concerns", reference_corpus) is gold
    assert gold.benchmark is None
    assert "Benchmark" not in gold.as_text()


def test_as_text_contains_layers():
    text = generate_gold_standard("R4").as_text()
    assert text.startswith("Principle:")
    assert "Practical controls:" in text
    assert "Example wording:" in text
