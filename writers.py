import json
import pandas as pd
from pathlib import Path
from typing import List
import dataclasses
import re

from models import AnalysisResult, CanonicalQuestionnaireModel, ProgramIngestion, QuestionnaireAnalysis, RequirementResult

RESULT_COLUMNS = [
    "requirement_id",
    "title",
    "status",
    "confidence_score",
    "evidence_count",
    "current_text_summary",
    "gaps",
    "recommendations",
    "evidence",
    "gold_standard_family",
    "gold_standard",
]

CANONICAL_COLUMNS = ["id", "kind", "type", "detected", "stem", "text", "attach_evidence_prompt_detected"]


def to_json(value):
    return json.dumps(value, ensure_ascii=False) if value is not None else "null"


def analysis_file_name(result: AnalysisResult) -> str:
    """'<document_id>-<timestamp>.json' with characters unsafe in file names replaced."""
    stamp = re.sub(r'[^0-9A-Za-z]+', '', result.timestamp)
    doc = re.sub(r'[^0-9A-Za-z_.-]+', '_', result.document_id or 'analysis')
    return f"{doc}-{stamp}.json"


def write_analysis_json(result: AnalysisResult, out_dir: Path) -> Path:
    """Store one analysis run as a JSON file in ``out_dir`` and return its path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    file_path = out_dir / analysis_file_name(result)
    with file_path.open("w", encoding="utf-8") as f:
        json.dump(dataclasses.asdict(result), f, indent=2, ensure_ascii=False)
    return file_path


def write_questionnaire_json(analysis: QuestionnaireAnalysis, file_path: Path):
    with file_path.open("w", encoding="utf-8") as f:
        json.dump(dataclasses.asdict(analysis), f, indent=2, ensure_ascii=False)


def write_ingestion_json(ingestion: ProgramIngestion, file_path: Path):
    with file_path.open("w", encoding="utf-8") as f:
        json.dump(dataclasses.asdict(ingestion), f, indent=2, ensure_ascii=False)


def write_results_jsonl(results: List[RequirementResult], file_path: Path):
    """Writes one requirement result per line."""
    with file_path.open("w", encoding="utf-8") as f:
        for res in results:
            f.write(json.dumps(dataclasses.asdict(res), ensure_ascii=False) + "\n")


def write_results_csv(results: List[RequirementResult], file_path: Path):
    """Writes requirement results to a CSV file.

    Lists (gaps, recommendations, evidence) are serialized as JSON strings to keep the CSV flat.
    """
    if not results:
        pd.DataFrame(columns=RESULT_COLUMNS).to_csv(file_path, index=False)
        return

    records = []
    for res in results:
        records.append({
            "requirement_id": res.requirement_id,
            "title": res.title,
            "status": res.status,
            "confidence_score": round(res.confidence_score, 4),
            "evidence_count": len(res.evidence),
            "current_text_summary": res.current_text_summary,
            "gaps": to_json(res.gaps),
            "recommendations": to_json(res.recommendations),
            "evidence": to_json([dataclasses.asdict(ev) for ev in res.evidence]),
            "gold_standard_family": res.gold_standard.template_family,
            "gold_standard": res.gold_standard.as_text(),
        })

    pd.DataFrame(records, columns=RESULT_COLUMNS).to_csv(file_path, index=False)


def write_canonical_csv(model: CanonicalQuestionnaireModel, file_path: Path):
    """One row per canonical slot, questions first, in id order."""
    records = []
    for q in model.questions:
        records.append({
            "id": q.id, "kind": "question", "type": q.type, "detected": q.detected,
            "stem": q.stem, "text": q.answer_text, "attach_evidence_prompt_detected": None,
        })
    for r in model.requirements:
        records.append({
            "id": r.id, "kind": "requirement", "type": None, "detected": r.detected,
            "stem": r.requirement_text, "text": r.provider_narrative,
            "attach_evidence_prompt_detected": r.attach_evidence_prompt_detected,
        })
    pd.DataFrame(records, columns=CANONICAL_COLUMNS).to_csv(file_path, index=False)
