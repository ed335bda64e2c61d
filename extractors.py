import logging
import re
from typing import Iterable, Optional, Tuple

from checklist import ChecklistConfig, DEFAULT_CHECKLIST
from marker_index import build_header_index
from models import CanonicalQuestionItem, CanonicalQuestionnaireModel, CanonicalRequirementItem
from utils import collapse_whitespace, normalize_submission_text

logger = logging.getLogger(__name__)

_LEADING_PUNCT_RE = re.compile(r'^[:.\-–—\s]*')
PLACEHOLDER_SUFFIX = "(not detected in extracted text)"


def clean_narrative(text: Optional[str], markers: Iterable[str]) -> str:
    """Strip questionnaire template wording in front of a provider's answer.

    For each marker phrase, in order, keep only the text after its last
    case-insensitive occurrence. Leading ':', '.', '-', dashes and
    whitespace are removed from the result.
    """
    cleaned = text or ''
    for marker in markers:
        idx = cleaned.lower().rfind(marker.lower())
        if idx != -1:
            cleaned = cleaned[idx + len(marker):]
    return _LEADING_PUNCT_RE.sub('', cleaned).strip()


def split_attach_prompt(narrative: str, pattern: str) -> Tuple[str, bool]:
    """Cut a requirement narrative before the 'attach evidence' prompt, if present."""
    m = re.search(pattern, narrative or '', re.IGNORECASE)
    if not m:
        return (narrative or '').strip(), False
    return narrative[:m.start()].strip(), True


def placeholder_stem(item_id: str) -> str:
    return f"{item_id} {PLACEHOLDER_SUFFIX}"


def strip_requirement_echo(narrative: str, requirement_text: str) -> str:
    """Drop the checklist's own requirement wording when a block repeats it ahead of the answer."""
    flat = collapse_whitespace(narrative)
    echo = collapse_whitespace(requirement_text)
    if echo and flat.lower().startswith(echo.lower()):
        return _LEADING_PUNCT_RE.sub('', flat[len(echo):]).strip()
    return narrative


def build_canonical_model(raw_text: Optional[str], checklist: ChecklistConfig = DEFAULT_CHECKLIST,
                          strip_boilerplate: bool = True) -> CanonicalQuestionnaireModel:
    """Build the fixed-cardinality questionnaire view of a submission.

    Every question id Q1..Qn and requirement id R1..Rm of the checklist is
    present in the output, in id order, whether or not a header for it was
    found. Undetected items carry a visible placeholder and ``detected=False``.

    With ``strip_boilerplate`` (the default) questionnaire template wording is
    removed from answers and narratives first, so only the provider's own text
    is kept; an unanswered template block yields an empty narrative.
    """
    text = normalize_submission_text(raw_text)
    index = build_header_index(text, checklist.question_count, checklist.requirement_count)
    blocks = index.by_uid()

    questions = []
    for n, qid in enumerate(checklist.question_ids, start=1):
        block = blocks.get(qid)
        if block is None:
            questions.append(CanonicalQuestionItem(
                id=qid, type=checklist.question_type(qid), stem=placeholder_stem(qid),
                answer_text='', detected=False))
            continue
        answer = block.body
        if strip_boilerplate:
            answer = clean_narrative(answer, checklist.boilerplate_markers)
        questions.append(CanonicalQuestionItem(
            id=qid,
            type=checklist.question_type(qid),
            stem=block.stem or f"Question {n}",
            answer_text=answer,
            detected=True,
        ))

    requirements = []
    for n, rid in enumerate(checklist.requirement_ids, start=1):
        req_text = checklist.canonical_requirement_texts[n - 1]
        block = blocks.get(rid)
        if block is None:
            requirements.append(CanonicalRequirementItem(
                id=rid, requirement_text=req_text, provider_narrative='',
                attach_evidence_prompt_detected=False, detected=False))
            continue
        narrative, attach = split_attach_prompt(block.body, checklist.attach_evidence_pattern)
        if strip_boilerplate:
            narrative = strip_requirement_echo(narrative, req_text)
            narrative = clean_narrative(narrative, checklist.boilerplate_markers)
        requirements.append(CanonicalRequirementItem(
            id=rid,
            requirement_text=req_text,
            provider_narrative=narrative,
            attach_evidence_prompt_detected=attach,
            detected=True,
        ))

    logger.debug("Canonical model: %d/%d questions, %d/%d requirements detected",
                 sum(q.detected for q in questions), len(questions),
                 sum(r.detected for r in requirements), len(requirements))
    return CanonicalQuestionnaireModel(questions=questions, requirements=requirements)
