#!/usr/bin/env python3
"""
Canonical coverage validation.

Reports which questionnaire slots were detected in a submission and which
fell back to placeholders, so a reviewer can tell whether a low score
comes from missing evidence or from text that failed to extract.
"""

import json
import logging
from io import StringIO
from pathlib import Path
from typing import Dict, List

from models import CanonicalQuestionnaireModel

logger = logging.getLogger(__name__)

# Below this share of detected slots the extraction itself is suspect
LOW_COVERAGE_THRESHOLD = 50.0


def validate_canonical_coverage(model: CanonicalQuestionnaireModel) -> Dict:
    """Summarise detection coverage of a canonical questionnaire model."""
    if model is None:
        return {'status': 'error', 'message': 'No canonical model supplied'}

    q_found = [q.id for q in model.questions if q.detected]
    q_missing = [q.id for q in model.questions if not q.detected]
    r_found = [r.id for r in model.requirements if r.detected]
    r_missing = [r.id for r in model.requirements if not r.detected]
    attach = [r.id for r in model.requirements if r.attach_evidence_prompt_detected]
    empty_narratives = [r.id for r in model.requirements if r.detected and not r.provider_narrative]

    total = len(model.questions) + len(model.requirements)
    found = len(q_found) + len(r_found)
    score = round(found / total * 100, 1) if total else 0.0

    results = {
        'status': 'success',
        'question_count': len(model.questions),
        'requirement_count': len(model.requirements),
        'questions_found': q_found,
        'questions_missing': q_missing,
        'requirements_found': r_found,
        'requirements_missing': r_missing,
        'attach_prompts_detected': attach,
        'empty_narratives': empty_narratives,
        'completeness_score': score,
        'low_coverage': score < LOW_COVERAGE_THRESHOLD,
    }
    if results['low_coverage']:
        logger.warning("Only %.1f%% of canonical items detected; check the text extraction", score)
    return results


def _preview(ids: List[str], limit: int = 25) -> str:
    return f"{', '.join(ids[:limit])}{'...' if len(ids) > limit else ''}"


def save_validation_results(results: Dict, output_dir: Path) -> None:
    """Persist validation results to JSON and text report files."""
    try:
        json_path = output_dir / "canonical_validation.json"
        with json_path.open('w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        report_path = output_dir / "canonical_validation_report.txt"
        buf = StringIO()
        buf.write("Canonical Coverage Summary\n")
        if results.get('status') != 'success':
            buf.write(f"Status: {results.get('status')} - {results.get('message', '')}\n")
        else:
            buf.write(f"Completeness: {results['completeness_score']}%\n")
            buf.write(f"Questions Found: {len(results['questions_found'])}/{results['question_count']}\n")
            if results['questions_missing']:
                buf.write(f"Questions Missing: {_preview(results['questions_missing'])}\n")
            buf.write(f"Requirements Found: {len(results['requirements_found'])}/{results['requirement_count']}\n")
            if results['requirements_missing']:
                buf.write(f"Requirements Missing: {_preview(results['requirements_missing'])}\n")
            buf.write(f"Attach Evidence Prompts: {len(results['attach_prompts_detected'])}\n")
        report_path.write_text(buf.getvalue(), encoding='utf-8')
    except OSError as e:
        logger.warning("Failed to save validation results: %s", e)


def print_validation_report(results: Dict) -> None:
    print("\n" + "=" * 80)
    print("📋 CANONICAL COVERAGE REPORT")
    print("=" * 80)

    if results.get('status') != 'success':
        print(f"❌ Error: {results.get('message')}")
        return

    print(f"📊 Completeness: {results['completeness_score']}%")
    print(f"\n🔍 QUESTIONS: {len(results['questions_found'])}/{results['question_count']} detected")
    if results['questions_missing']:
        print(f"   ❌ Missing: {_preview(results['questions_missing'])}")
    print(f"\n🔍 REQUIREMENTS: {len(results['requirements_found'])}/{results['requirement_count']} detected")
    if results['requirements_missing']:
        print(f"   ❌ Missing: {_preview(results['requirements_missing'])}")
    if results['empty_narratives']:
        print(f"   ⚠️ Headers without narrative: {_preview(results['empty_narratives'])}")
    if results['attach_prompts_detected']:
        print(f"   📎 Attach-evidence prompts: {_preview(results['attach_prompts_detected'])}")
    if results['low_coverage']:
        print("\n⚠️ Low coverage: the submission text may not have extracted cleanly.")
    else:
        print("\n✅ Coverage looks reasonable.")
    print("=" * 80)
