"""Sentence-level lexical index over the reference corpus.

Scoring for a query ``q`` and an indexed sentence ``s``::

    common = |unique_tokens(q) & token_set(s)|
    idf    = sum(ln(1 + total_docs / max(1, df(t))) for t matched)
    score  = (common / max(1, len(tokens(s)))) * idf

``df(t)`` counts the indexed *sentences* containing ``t`` while
``total_docs`` counts reference *documents*, so the idf term stays positive
even for very common tokens. Scores are not normalised to [0, 1]; only the
derived confidence is capped.
"""
import logging
import math
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from models import Evidence, IndexEntry, SourceDocument
from segmentation import segment
from settings import AnalysisSettings, DEFAULT_SETTINGS
from utils import tokenize, unique_in_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LexicalIndex:
    entries: Tuple[IndexEntry, ...]
    doc_freq: Mapping[str, int]
    total_docs: int
    token_min_length: int = 3

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries or self.total_docs == 0


def build_index(corpus: Iterable[SourceDocument], settings: AnalysisSettings = DEFAULT_SETTINGS) -> LexicalIndex:
    """Index every sentence of at least ``min_reference_sentence_chars`` characters."""
    entries = []
    doc_freq: Counter = Counter()
    total_docs = 0
    for doc in corpus or []:
        total_docs += 1
        for sent in segment(doc.extracted_text):
            if len(sent.text) < settings.min_reference_sentence_chars:
                continue
            tokens = tokenize(sent.text, settings.token_min_length)
            token_set = frozenset(tokens)
            doc_freq.update(token_set)
            entries.append(IndexEntry(
                doc_id=doc.id,
                source_doc_name=doc.name,
                source_url=doc.source_url,
                sentence=sent.text,
                tokens=tuple(tokens),
                token_set=token_set,
                location=sent.location,
            ))
    logger.info("Indexed %d sentences from %d reference documents (%d distinct tokens)",
                len(entries), total_docs, len(doc_freq))
    return LexicalIndex(
        entries=tuple(entries),
        doc_freq=MappingProxyType(dict(doc_freq)),
        total_docs=total_docs,
        token_min_length=settings.token_min_length,
    )


def score_entry(index: LexicalIndex, entry: IndexEntry, query_tokens: List[str]) -> float:
    """Unrounded relevance of one entry for a de-duplicated token list; 0.0 when nothing matches."""
    matched = [t for t in query_tokens if t in entry.token_set]
    if not matched:
        return 0.0
    idf_sum = sum(math.log(1 + index.total_docs / max(1, index.doc_freq.get(t, 0))) for t in matched)
    return (len(matched) / max(1, len(entry.tokens))) * idf_sum


def search(index: LexicalIndex, query: Optional[str], top_n: int = 5,
           settings: AnalysisSettings = DEFAULT_SETTINGS) -> List[Evidence]:
    """Return up to ``top_n`` hits ordered by descending score.

    Ties keep index insertion order. Empty index, empty corpus and queries
    without usable tokens all yield ``[]``.
    """
    if index is None or index.is_empty:
        return []
    query_tokens = unique_in_order(tokenize(query, index.token_min_length))
    if not query_tokens:
        return []

    scored = []
    for entry in index.entries:
        score = score_entry(index, entry, query_tokens)
        if score > 0:
            scored.append((score, entry))
    # sorted() is stable, so equal scores stay in insertion order
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)[:max(0, top_n)]

    hits = []
    for score, entry in scored:
        rounded = round(score, settings.score_precision)
        hits.append(Evidence(
            source_doc_name=entry.source_doc_name,
            excerpt=entry.sentence,
            location=entry.location,
            relevance_score=rounded,
            confidence=min(settings.indexed_confidence_cap, rounded),
            source_url=entry.source_url,
        ))
    return hits
