import pytest

from checklist import ChecklistConfig
from models import Requirement, SourceDocument, Standard


@pytest.fixture
def small_checklist():
    """Three questions and two requirements in one standard."""
    reqs = (
        Requirement(id=1, standard=1, title="Appropriate Supervision",
                    description="Students are supervised according to their stage of development.",
                    evidence_examples=("Staff to student ratios across clinics", "Supervision policy")),
        Requirement(id=2, standard=1, title="Patient Consent",
                    description="Patient agreement to treatment by a student is recorded.",
                    evidence_examples=("Examples of recorded consent",)),
    )
    return ChecklistConfig(
        name="Test checklist",
        version="test-1",
        standards=(Standard(id=1, name="Patients", description="", requirements=reqs),),
        question_titles=("Provider name", "Programme format", "Anything further"),
        canonical_requirement_texts=(
            "Students must be supervised appropriately.",
            "Patient consent must be recorded.",
        ),
        extraction_only_questions=frozenset({"Q1"}),
        priority_requirements=frozenset({"R1"}),
    )


@pytest.fixture
def sample_submission():
    text = (
        "Q1 Provider Name: Example University.\n"
        "Q2 Programme format\n"
        "The programme runs over five years with a pre-clinical phase in years one and two.\n"
        "Requirement 1: Students are supervised on every clinic. The supervision ratio is one supervisor "
        "to four students. Attach evidence: rota.pdf\n"
        "Requirement 2\n"
        "Patient consent is recorded in the health record before treatment.\n"
    )
    return SourceDocument(id="piq-1", name="piq.txt", extracted_text=text)


@pytest.fixture
def reference_corpus():
    return [
        SourceDocument(id="ref-1", name="inspection_report.txt", extracted_text=(
            "The supervision ratio of staff to students was one to four in all clinics. "
            "Inspectors reviewed the consent records held in the patient notes."
        )),
        SourceDocument(id="ref-2", name="handbook.txt", extracted_text=(
            "Students must attend induction. The library opens at nine every weekday morning."
        )),
    ]
