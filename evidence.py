import logging
from dataclasses import dataclass, field
from typing import List, Optional

from lexical_index import LexicalIndex, search
from models import Evidence, Requirement, Sentence, SourceDocument
from segmentation import segment
from settings import AnalysisSettings, DEFAULT_SETTINGS
from utils import clamp, collapse_whitespace, tokenize, unique_in_order

logger = logging.getLogger(__name__)

NO_EVIDENCE_GAP = "No direct evidence found in selected document or provided references for this requirement."
PARTIAL_EVIDENCE_GAP = ("Partial - evidence found does not address the suggested evidence for this requirement "
                        "(e.g. {example}).")


@dataclass
class EvidenceBundle:
    evidence: List[Evidence]
    confidence: float
    gaps: List[str] = field(default_factory=list)


def requirement_keywords(requirement: Requirement, settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[str]:
    """Unique title + description tokens long enough to be meaningful, first-seen order."""
    text = f"{requirement.title} {requirement.description}"
    return unique_in_order(tokenize(text, settings.keyword_min_length))


def build_search_query(requirement: Requirement) -> str:
    if requirement.title and requirement.title.strip():
        return requirement.title
    if requirement.description and requirement.description.strip():
        return requirement.description
    return f"Requirement {requirement.id}"


def direct_scan(requirement: Requirement, submission: SourceDocument,
                sentences: Optional[List[Sentence]] = None,
                settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[Evidence]:
    """Keyword matches in the submission's own sentences.

    Relevance is the share of requirement keywords appearing as literal
    substrings of the sentence. Every sentence is considered, whatever its
    length. Pass pre-segmented ``sentences`` to avoid re-segmenting per requirement.
    """
    keywords = requirement_keywords(requirement, settings)
    if not keywords or submission is None:
        return []
    if sentences is None:
        sentences = segment(submission.extracted_text)
    found = []
    for sent in sentences:
        lowered = sent.text.lower()
        matches = sum(1 for k in keywords if k in lowered)
        if matches == 0:
            continue
        found.append(Evidence(
            source_doc_name=submission.name,
            excerpt=sent.text,
            location=sent.location,
            relevance_score=matches / max(1, len(keywords)),
            confidence=settings.direct_evidence_confidence,
            source_url=submission.source_url,
        ))
    return found


def indexed_search(requirement: Requirement, index: LexicalIndex,
                   settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[Evidence]:
    return search(index, build_search_query(requirement), top_n=settings.top_n, settings=settings)


def dedupe_key(excerpt: str, key_chars: int = 200) -> str:
    return collapse_whitespace((excerpt or '')[:key_chars])


def dedupe_evidence(items: List[Evidence], key_chars: int = 200) -> List[Evidence]:
    """Drop near-identical excerpts (first occurrence wins), then order by relevance descending."""
    seen = set()
    kept = []
    for ev in items:
        key = dedupe_key(ev.excerpt, key_chars)
        if key in seen:
            continue
        seen.add(key)
        kept.append(ev)
    return sorted(kept, key=lambda ev: ev.relevance_score, reverse=True)


def aggregate_confidence(items: List[Evidence], settings: AnalysisSettings = DEFAULT_SETTINGS) -> float:
    """Mean relevance, plus a breadth bonus when enough independent items exist, clamped to [0, 1]."""
    if not items:
        return 0.0
    mean = sum(ev.relevance_score for ev in items) / len(items)
    if len(items) >= settings.breadth_min_items:
        mean += settings.breadth_bonus
    return clamp(mean)


def detect_gaps(requirement: Requirement, items: List[Evidence],
                settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[str]:
    """Coarse gap detection.

    With evidence present, a gap is reported when no excerpt contains the
    lower-cased first ``example_prefix_chars`` characters of any example
    evidence phrase. This is a shallow substring check and produces both false
    gaps and missed gaps; tune ``example_prefix_chars`` rather than rely on it.
    """
    if not items:
        return [NO_EVIDENCE_GAP]
    examples = [e for e in requirement.evidence_examples if e and e.strip()]
    if not examples:
        return []
    excerpts = [ev.excerpt.lower() for ev in items]
    for example in examples:
        prefix = example.lower()[:settings.example_prefix_chars]
        if any(prefix in ex for ex in excerpts):
            return []
    return [PARTIAL_EVIDENCE_GAP.format(example=examples[0])]


def aggregate_evidence(requirement: Requirement, submission: Optional[SourceDocument], index: LexicalIndex,
                       submission_sentences: Optional[List[Sentence]] = None,
                       settings: AnalysisSettings = DEFAULT_SETTINGS) -> EvidenceBundle:
    """Direct-scan evidence first, then indexed evidence; deduplicated, scored and gap-checked."""
    direct = direct_scan(requirement, submission, submission_sentences, settings) if submission else []
    indexed = indexed_search(requirement, index, settings)
    merged = dedupe_evidence(direct + indexed, settings.dedup_key_chars)
    confidence = aggregate_confidence(merged, settings)
    logger.debug("Requirement %s: %d direct, %d indexed, %d after dedupe, confidence %.3f",
                 requirement.id, len(direct), len(indexed), len(merged), confidence)
    return EvidenceBundle(evidence=merged, confidence=confidence, gaps=detect_gaps(requirement, merged, settings))
