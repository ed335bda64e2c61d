import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from assessment.classifier import classify_status, recommend_actions, summarize_statuses
from assessment.gold_standard import generate_for_requirement
from checklist import ChecklistConfig, DEFAULT_CHECKLIST
from evidence import aggregate_evidence
from extractors import build_canonical_model
from lexical_index import LexicalIndex, build_index
from models import (
    AnalysisResult,
    CanonicalQuestionnaireModel,
    Requirement,
    RequirementResult,
    Sentence,
    SourceDocument,
)
from segmentation import segment
from settings import AnalysisSettings, DEFAULT_SETTINGS
from utils import truncate

logger = logging.getLogger(__name__)


def new_result_id() -> str:
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def current_text_summary(requirement: Requirement, canonical: Optional[CanonicalQuestionnaireModel],
                         evidence_count: int, settings: AnalysisSettings = DEFAULT_SETTINGS) -> str:
    """The provider's own narrative for the requirement when one was found, else an evidence count."""
    if canonical is not None:
        item = canonical.requirement(f"R{requirement.id}")
        if item is not None and item.provider_narrative:
            return truncate(item.provider_narrative, settings.summary_chars)
    return f"Found {evidence_count} evidence items"


def assess_requirement(requirement: Requirement, submission: Optional[SourceDocument], index: LexicalIndex,
                       submission_sentences: Optional[List[Sentence]] = None,
                       canonical: Optional[CanonicalQuestionnaireModel] = None,
                       settings: AnalysisSettings = DEFAULT_SETTINGS,
                       references: Sequence[SourceDocument] = ()) -> RequirementResult:
    bundle = aggregate_evidence(requirement, submission, index, submission_sentences, settings)
    status = classify_status(len(bundle.evidence), bundle.confidence, settings.met_threshold)
    narrative = None
    if canonical is not None:
        item = canonical.requirement(f"R{requirement.id}")
        narrative = item.provider_narrative if item is not None else None
    return RequirementResult(
        requirement_id=requirement.id,
        title=requirement.title,
        status=status,
        evidence=bundle.evidence,
        gaps=bundle.gaps,
        recommendations=recommend_actions(status, bundle.gaps),
        confidence_score=bundle.confidence,
        gold_standard=generate_for_requirement(requirement, narrative, references),
        current_text_summary=current_text_summary(requirement, canonical, len(bundle.evidence), settings),
    )


def analyze_submission(submission: SourceDocument, references: Sequence[SourceDocument] = (),
                       checklist: Optional[ChecklistConfig] = None,
                       settings: Optional[AnalysisSettings] = None,
                       should_abort: Optional[Callable[[], bool]] = None) -> AnalysisResult:
    """Assess one submission against every checklist requirement.

    A fresh index is built from ``references`` on every call. ``should_abort``
    is polled before each requirement; when it returns true the requirements
    assessed so far are returned with ``aborted=True``.
    """
    checklist = checklist or DEFAULT_CHECKLIST
    settings = settings or DEFAULT_SETTINGS
    text = submission.extracted_text if submission is not None else ''
    document_id = submission.id if submission is not None else ''

    canonical = build_canonical_model(text, checklist, settings.strip_boilerplate)
    index = build_index(references, settings)
    sentences = segment(text)
    logger.info("Analysing %s: %d sentences, %d reference sentences, %d requirements",
                submission.name if submission is not None else '<empty>', len(sentences), len(index),
                len(checklist.requirements))

    results: List[RequirementResult] = []
    aborted = False
    for requirement in checklist.requirements:
        if should_abort is not None and should_abort():
            aborted = True
            logger.warning("Analysis aborted after %d of %d requirements",
                           len(results), len(checklist.requirements))
            break
        result = assess_requirement(requirement, submission, index, sentences, canonical, settings, references)
        logger.debug("R%s %s: %s (confidence %.3f, %d evidence)", requirement.id, requirement.title,
                     result.status, result.confidence_score, len(result.evidence))
        results.append(result)

    summary = summarize_statuses(results)
    summary["aborted"] = aborted
    summary["checklist"] = f"{checklist.name} v{checklist.version}"
    summary["questions_detected"] = sum(q.detected for q in canonical.questions)
    summary["requirements_detected"] = sum(r.detected for r in canonical.requirements)
    logger.info("Analysis complete: %s", summary["status_counts"])

    return AnalysisResult(
        id=new_result_id(),
        document_id=document_id,
        timestamp=utc_timestamp(),
        requirement_results=results,
        summary=summary,
        canonical=canonical,
        aborted=aborted,
    )
