import re
from pathlib import Path
from typing import Iterable, List, Optional

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_PAGE_MARKER_RE = re.compile(r"\[PAGE\s*\d+\]", re.IGNORECASE)
_HSPACE_RE = re.compile(r"[ \t]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_ANY_SPACE_RE = re.compile(r"\s+")


def tokenize(text: Optional[str], min_length: int = 3) -> List[str]:
    """Lowercase, replace non-alphanumerics with spaces, keep tokens of ``min_length`` or more.

    Duplicates are kept; callers that need a set build one.
    """
    if not text:
        return []
    cleaned = _NON_ALNUM_RE.sub(" ", text.lower())
    return [t for t in cleaned.split() if len(t) >= min_length]


def unique_in_order(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def collapse_whitespace(text: Optional[str]) -> str:
    return _ANY_SPACE_RE.sub(" ", text or "").strip()


def strip_page_markers(text: Optional[str]) -> str:
    """Remove page-break artefacts left by text extraction ('[PAGE 3]', form feeds)."""
    text = _PAGE_MARKER_RE.sub("", text or "")
    return text.replace("\f", "\n")


def normalize_submission_text(text: Optional[str]) -> str:
    """Canonical whitespace form used before header scanning.

    Drops carriage returns and page markers, collapses space/tab runs to one
    space and caps runs of blank lines at one.
    """
    text = strip_page_markers(text).replace("\r", "")
    text = _HSPACE_RE.sub(" ", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def truncate(text: Optional[str], max_chars: int) -> str:
    text = text or ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip()


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def get_repo_root() -> Path:
    """Return repository root (directory containing this file)."""
    return Path(__file__).parent


def ensure_output_base() -> Path:
    """Ensure the central 'output' directory exists and return it."""
    out_base = get_repo_root() / 'output'
    out_base.mkdir(parents=True, exist_ok=True)
    return out_base


def build_output_subdir(base_name: str) -> Path:
    """Return a unique subdirectory inside central output for a submission.

    Uses `<name>_output`; if that directory exists, adds a `_runN` suffix.
    """
    out_base = ensure_output_base()
    sanitized = re.sub(r'[\\/]+', '-', base_name).strip()
    candidate = out_base / f"{sanitized}_output"
    if not candidate.exists():
        return candidate
    suffix = 1
    while True:
        run_candidate = out_base / f"{sanitized}_output_run{suffix}"
        if not run_candidate.exists():
            return run_candidate
        suffix += 1
