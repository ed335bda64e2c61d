"""Gold-standard guidance for a requirement or question.

Resolution order:

1. curated guidance for the normalised id, returned as-is;
2. the first theme whose predicate matches the description;
3. generic governance guidance.

Programme text can add one reinforcement control to themed or generic
guidance. With reference documents, an excerpt mentioning the item's title
is attached as a benchmark. Any input, including ``None``, yields a
well-formed result.
"""
from __future__ import annotations
import dataclasses
import logging
import re
from typing import List, Optional, Sequence, Tuple, Union

from models import GoldStandard, Requirement, SourceDocument
from utils import collapse_whitespace, tokenize
from .curated_templates import curated_template
from .fallback_template import GENERIC
from .template_base import ThemeRegistry
from . import theme_templates  # noqa: F401  (registers the themes)

logger = logging.getLogger(__name__)

UNSPECIFIED_ID = "UNSPECIFIED"

# Reference excerpt attached to guidance as a real-world benchmark
BENCHMARK_CHARS = 300
BENCHMARK_DOC_HINT = "inspection"

_SHORT_ID_RE = re.compile(r'^([RQ])\s*(\d{1,2})$')
_REQUIREMENT_RE = re.compile(r'\bREQUIREMENT\s*(\d{1,2})\b')
_QUESTION_RE = re.compile(r'\bQUESTION\s*(\d{1,2})\b')

# keyword in programme text -> reinforcement control
REINFORCEMENTS = (
    ("audit", "Audit these arrangements on a defined cycle and act on the findings."),
    ("training", "Keep training records for everyone involved in delivering these arrangements."),
)

ItemId = Union[str, int, None]


def normalize_item_id(item_id: ItemId) -> str:
    """'r1', 'R 1', 1, 'Requirement 1' -> 'R1'; 'q6', 'Question 6' -> 'Q6'.

    Text that merely mentions 'Requirement 7' resolves to 'R7'. Anything else
    is returned upper-cased and trimmed.
    """
    if item_id is None:
        return UNSPECIFIED_ID
    if isinstance(item_id, int):
        return f"R{item_id}"
    key = str(item_id).strip().upper()
    if not key:
        return UNSPECIFIED_ID
    m = _SHORT_ID_RE.match(key)
    if m:
        return f"{m.group(1)}{int(m.group(2))}"
    m = _REQUIREMENT_RE.search(key)
    if m:
        return f"R{int(m.group(1))}"
    m = _QUESTION_RE.search(key)
    if m:
        return f"Q{int(m.group(1))}"
    return key


def _reinforcement(program_text: Optional[str]) -> List[str]:
    lowered = (program_text or '').lower()
    for keyword, control in REINFORCEMENTS:
        if keyword in lowered:
            return [control]
    return []


def generate_gold_standard(requirement_id: ItemId, description: Optional[str] = None,
                           program_text: Optional[str] = None) -> GoldStandard:
    key = normalize_item_id(requirement_id)
    curated = curated_template(key)
    if curated is not None:
        return curated.render(key)

    extra = _reinforcement(program_text)
    matched = ThemeRegistry.match(description or '')
    if matched is not None:
        theme, template = matched
        logger.debug("Gold standard for %s from theme %s", key, theme)
        return template.render(key, extra)
    return GENERIC.render(key, extra)


def benchmark_keyword(title: Optional[str], min_length: int = 4) -> Optional[str]:
    """Last distinctive word of a title: 'Appropriate Supervision' -> 'supervision'."""
    words = tokenize(title, min_length)
    return words[-1] if words else None


def find_benchmark(keyword: Optional[str], references: Sequence[SourceDocument]) -> Optional[Tuple[str, str]]:
    """(document name, excerpt) starting at the first mention of ``keyword``.

    Only one reference is consulted: an inspection report when one is
    supplied, otherwise the first document.
    """
    if not keyword or not references:
        return None
    doc = next((d for d in references if BENCHMARK_DOC_HINT in (d.name or '').lower()), references[0])
    text = doc.extracted_text or ''
    at = text.lower().find(keyword.lower())
    if at == -1:
        return None
    return doc.name, collapse_whitespace(text[at:at + BENCHMARK_CHARS])


def with_benchmark(gold: GoldStandard, title: Optional[str], references: Sequence[SourceDocument]) -> GoldStandard:
    found = find_benchmark(benchmark_keyword(title), references)
    if found is None:
        return gold
    source, excerpt = found
    return dataclasses.replace(gold, benchmark=excerpt, benchmark_source=source)


def generate_for_requirement(requirement: Optional[Requirement], program_text: Optional[str] = None,
                             references: Sequence[SourceDocument] = ()) -> GoldStandard:
    """Guidance for a (possibly missing) requirement object, with a reference benchmark when one is found."""
    if requirement is None:
        return generate_gold_standard(None, None, program_text)
    description = f"{requirement.title or ''} {requirement.description or ''}".strip()
    gold = generate_gold_standard(requirement.id, description, program_text)
    return with_benchmark(gold, requirement.title, references)
