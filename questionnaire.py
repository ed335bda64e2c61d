import logging
from typing import List, Optional, Sequence

from analyzer import new_result_id, utc_timestamp
from assessment.gold_standard import generate_for_requirement, generate_gold_standard, with_benchmark
from checklist import ChecklistConfig, DEFAULT_CHECKLIST
from extractors import build_canonical_model, clean_narrative
from lexical_index import build_index, search
from models import (
    CanonicalQuestionnaireModel,
    ExtractedField,
    QuestionResponse,
    QuestionnaireAnalysis,
    RequirementAssessment,
    SourceDocument,
)
from settings import AnalysisSettings, DEFAULT_SETTINGS
from utils import truncate

logger = logging.getLogger(__name__)

NARRATIVE_COMPLETE = 'complete'
NARRATIVE_INCOMPLETE = 'incomplete'
NARRATIVE_NEEDS_REVIEW = 'needs-review'

MIN_COMPLETE_NARRATIVE_CHARS = 200
EVIDENCE_ANCHOR_LIMIT = 3
NOT_STATED = '(Not stated)'

INSPECTION_QUESTIONS = {
    'R1': ["How do you assure yourselves that no student undertakes patient care before meeting competency thresholds?",
           "Who sets these thresholds?"],
    'R4': ["How do you determine appropriate supervision levels?", "Who approves supervisor ratios?"],
    'R7': ["How are patient safety incidents identified?", "How are serious issues escalated to the GDC?"],
    'R9': ["Who is responsible for curriculum quality oversight?", "How is effectiveness of changes evaluated?"],
    'R16': ["How do you ensure assessments are valid?", "How do you assure consistency across sites?"],
}
DEFAULT_INSPECTION_QUESTION = "How is ongoing compliance monitored and evidenced?"

REQUIREMENT_ACTIONS = ("Specify governance ownership", "Link to internal quality assurance (IQA) reports")
BEST_PRACTICE_RECOMMENDATIONS = (
    "Ensure all clinical supervisors have documented GDC-specific training.",
    "Implement a centralized dashboard for real-time monitoring of student competency thresholds.",
)


def classify_narrative(text: Optional[str]) -> str:
    """Depth check of a free-text answer: empty, short, or long enough to review as complete."""
    if not text or not text.strip():
        return NARRATIVE_INCOMPLETE
    if len(text.strip()) < MIN_COMPLETE_NARRATIVE_CHARS:
        return NARRATIVE_NEEDS_REVIEW
    return NARRATIVE_COMPLETE


def inspection_questions_for_requirement(req_id: str) -> List[str]:
    return list(INSPECTION_QUESTIONS.get(req_id, [DEFAULT_INSPECTION_QUESTION]))


def _question_recommendations(status: str) -> List[str]:
    first = ("Immediate action: Provide detailed operational narrative." if status == NARRATIVE_INCOMPLETE
             else "Refine response with specific governance owners.")
    return [first, "Cross-reference with clinical placement audits."]


def analyze_questionnaire(submission: SourceDocument, references: Sequence[SourceDocument] = (),
                          checklist: Optional[ChecklistConfig] = None,
                          settings: Optional[AnalysisSettings] = None,
                          model: Optional[CanonicalQuestionnaireModel] = None) -> QuestionnaireAnalysis:
    """Review the questionnaire answers themselves.

    Administrative (extraction-only) questions become extracted fields;
    analytical questions and detected requirement narratives are graded by
    depth and anchored to reference evidence.
    """
    checklist = checklist or DEFAULT_CHECKLIST
    settings = settings or DEFAULT_SETTINGS
    if model is None:
        model = build_canonical_model(submission.extracted_text, checklist, settings.strip_boilerplate)
    index = build_index(references, settings)

    fields: List[ExtractedField] = []
    responses: List[QuestionResponse] = []
    assessments: List[RequirementAssessment] = []
    gaps: List[str] = []

    for q in model.questions:
        if q.type == 'extraction':
            value = ''
            if q.detected:
                value = clean_narrative(f"{q.stem} {q.answer_text}", checklist.boilerplate_markers)
            fields.append(ExtractedField(
                question_id=q.id,
                label=q.stem,
                value=value or NOT_STATED,
                status=NARRATIVE_COMPLETE if value else NARRATIVE_INCOMPLETE,
            ))
            if not value:
                gaps.append(f"Missing administrative field: {q.id}")
            continue

        if not q.detected:
            gaps.append(f"Question not detected in submission: {q.id}")
            continue
        status = classify_narrative(q.answer_text)
        if status != NARRATIVE_COMPLETE:
            gaps.append(f"Insufficient narrative for {q.id}: {q.stem}")
        responses.append(QuestionResponse(
            question_id=q.id,
            question=q.stem,
            original_answer=q.answer_text or NOT_STATED,
            status=status,
            recommendations=_question_recommendations(status),
            evidence_references=search(index, q.stem, EVIDENCE_ANCHOR_LIMIT, settings),
            gold_standard=with_benchmark(generate_gold_standard(q.id, q.stem),
                                         checklist.question_titles[int(q.id[1:]) - 1], references),
        ))

    for item in model.requirements:
        if not item.detected:
            continue
        requirement = checklist.requirement_by_id(int(item.id[1:]))
        title = requirement.title if requirement is not None else item.id
        status = classify_narrative(item.provider_narrative)
        if status != NARRATIVE_COMPLETE:
            gaps.append(f"Insufficient narrative for {item.id}: {title}")
        assessments.append(RequirementAssessment(
            id=item.id,
            title=title,
            status=status,
            is_priority=item.id in checklist.priority_requirements,
            current_text_summary=truncate(item.provider_narrative, settings.summary_chars) or NOT_STATED,
            inspection_questions=inspection_questions_for_requirement(item.id),
            actions=list(REQUIREMENT_ACTIONS),
            evidence_anchors=search(index, title, EVIDENCE_ANCHOR_LIMIT, settings),
            gold_standard=generate_for_requirement(requirement, item.provider_narrative, references),
        ))

    graded = [*responses, *fields, *assessments]
    complete = sum(1 for item in graded if item.status == NARRATIVE_COMPLETE)
    completeness = round(complete / max(1, len(graded)) * 100)
    logger.info("Questionnaire %s: %d fields, %d responses, %d requirement narratives, %d%% complete",
                submission.id, len(fields), len(responses), len(assessments), completeness)

    return QuestionnaireAnalysis(
        id=new_result_id(),
        document_id=submission.id,
        timestamp=utc_timestamp(),
        responses=responses,
        extracted_fields=fields,
        requirement_assessments=assessments,
        overall_completeness=completeness,
        gaps_identified=gaps,
        best_practice_recommendations=list(BEST_PRACTICE_RECOMMENDATIONS),
    )
