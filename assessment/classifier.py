from __future__ import annotations
from collections import Counter
from typing import Dict, List

from models import (
    RequirementResult,
    STATUS_MET,
    STATUS_NOT_MET,
    STATUS_PARTIALLY_MET,
    STATUS_UNKNOWN,
    STATUSES,
)

DEFAULT_MET_THRESHOLD = 0.75

# Weight of each status in the overall compliance score
STATUS_WEIGHTS = {
    STATUS_MET: 1.0,
    STATUS_PARTIALLY_MET: 0.5,
    STATUS_NOT_MET: 0.0,
    STATUS_UNKNOWN: 0.0,
}


def classify_status(evidence_count: int, aggregate_confidence: float,
                    met_threshold: float = DEFAULT_MET_THRESHOLD) -> str:
    """Map evidence volume and confidence to a compliance status.

    No evidence means the status is unknown, whatever the confidence. The
    classifier never concludes ``not-met``: absence of evidence in the
    supplied text is not proof of non-compliance.
    """
    if evidence_count <= 0:
        return STATUS_UNKNOWN
    if aggregate_confidence >= met_threshold:
        return STATUS_MET
    return STATUS_PARTIALLY_MET


def recommend_actions(status: str, gaps: List[str]) -> List[str]:
    if status == STATUS_UNKNOWN:
        return ["Provide documents or narrative mapping to this requirement."]
    actions = []
    if status == STATUS_PARTIALLY_MET:
        actions.append("Strengthen the narrative with specific governance owners, monitoring frequency and outcomes.")
    if gaps:
        actions.append("Supply documents matching the suggested evidence for this requirement.")
    return actions


def summarize_statuses(results: List[RequirementResult]) -> Dict[str, object]:
    counts = Counter(r.status for r in results)
    by_status = {s: counts.get(s, 0) for s in STATUSES}
    total = len(results)
    score = sum(STATUS_WEIGHTS.get(r.status, 0.0) for r in results) / total if total else 0.0
    return {
        "total_requirements": total,
        "status_counts": by_status,
        "compliance_score": round(score * 100, 1),
        "evidence_items": sum(len(r.evidence) for r in results),
    }
