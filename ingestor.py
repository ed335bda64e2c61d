"""Infer questionnaire answers from a programme document.

Each question title and requirement title is reduced to its first few
words; the paragraph containing the most of them becomes the inferred
answer for that slot. Confidence is a fixed prior per family: a keyword hit
shows the paragraph is on topic, not that it answers the question.
"""
import logging
import re
from typing import List, Optional, Sequence

from checklist import ChecklistConfig, DEFAULT_CHECKLIST
from models import ProgramIngestion, SourceDocument
from utils import tokenize

logger = logging.getLogger(__name__)

QUESTION_KEYWORDS = 5
REQUIREMENT_KEYWORDS = 6
QUESTION_CONFIDENCE = 0.4
REQUIREMENT_CONFIDENCE = 0.35

_PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def split_paragraphs(text: Optional[str]) -> List[str]:
    text = (text or '').replace('\r\n', '\n')
    return [p.strip() for p in _PARAGRAPH_BREAK_RE.split(text) if p.strip()]


def title_keywords(title: Optional[str], limit: int) -> List[str]:
    """First ``limit`` words of a title, lower-cased with punctuation removed."""
    words = (title or '').split()[:limit]
    return [k for k in (_NON_ALNUM_RE.sub('', w.lower()) for w in words) if k]


def best_paragraph(paragraphs: Sequence[str], keywords: Sequence[str]) -> Optional[str]:
    """Paragraph containing the most keywords; the earliest wins ties. None when no keyword occurs."""
    best = None
    best_score = 0
    for para in paragraphs:
        tokens = set(tokenize(para, min_length=1))
        score = sum(1 for k in keywords if k in tokens)
        if score > best_score:
            best, best_score = para, score
    return best


def ingest_program_document(doc: Optional[SourceDocument],
                            checklist: ChecklistConfig = DEFAULT_CHECKLIST) -> ProgramIngestion:
    """Map each checklist question and requirement to its best-matching paragraph.

    Slots with no matching paragraph get confidence 0 and no inferred text.
    An empty document yields empty mappings.
    """
    result = ProgramIngestion(document_id=doc.id if doc is not None else '')
    text = doc.extracted_text if doc is not None else ''
    if not text or not text.strip():
        return result

    paragraphs = split_paragraphs(text)
    slots = [(qid, title, QUESTION_KEYWORDS, QUESTION_CONFIDENCE)
             for qid, title in zip(checklist.question_ids, checklist.question_titles)]
    slots += [(f"R{r.id}", r.title, REQUIREMENT_KEYWORDS, REQUIREMENT_CONFIDENCE)
              for r in checklist.requirements]

    for item_id, title, limit, prior in slots:
        match = best_paragraph(paragraphs, title_keywords(title, limit))
        if match is None:
            result.confidence[item_id] = 0.0
            continue
        result.inferred[item_id] = match
        result.confidence[item_id] = prior

    logger.info("Inferred %d of %d questionnaire slots from %s (%d paragraphs)",
                len(result.inferred), len(slots), doc.name, len(paragraphs))
    return result
