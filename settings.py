"""Tunable thresholds for the evidence pipeline.

All values are read-only at analysis time. ``load_settings`` reads a JSON
object of overrides, e.g. ``{"met_threshold": 0.8, "top_n": 10}``.
"""
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class AnalysisSettings:
    # Lexical index
    min_reference_sentence_chars: int = 20
    token_min_length: int = 3
    top_n: int = 5
    score_precision: int = 4
    # Evidence aggregation
    keyword_min_length: int = 4
    direct_evidence_confidence: float = 0.9
    indexed_confidence_cap: float = 0.95
    dedup_key_chars: int = 200
    breadth_bonus: float = 0.1
    breadth_min_items: int = 3
    # Coarse gap heuristic: prefix of each example-evidence phrase that must echo in an excerpt
    example_prefix_chars: int = 10
    # Classification
    met_threshold: float = 0.75
    # Output
    summary_chars: int = 400
    # Remove questionnaire template wording from answers before grading them
    strip_boilerplate: bool = True


DEFAULT_SETTINGS = AnalysisSettings()


def settings_from_dict(data: Dict[str, Any], base: AnalysisSettings = DEFAULT_SETTINGS) -> AnalysisSettings:
    """Return ``base`` with the known keys of ``data`` applied. Unknown keys are logged and ignored."""
    known = {f.name for f in dataclasses.fields(AnalysisSettings)}
    overrides = {}
    for key, value in (data or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown analysis setting: %s", key)
            continue
        overrides[key] = value
    return dataclasses.replace(base, **overrides)


def load_settings(path: Union[str, Path]) -> AnalysisSettings:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    settings = settings_from_dict(data)
    logger.info("Loaded analysis settings from %s", path)
    return settings
