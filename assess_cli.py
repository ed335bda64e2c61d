import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

from analyzer import analyze_submission
from checklist import ChecklistConfigError, DEFAULT_CHECKLIST, load_checklist
from coverage_validator import print_validation_report, save_validation_results, validate_canonical_coverage
from ingestor import ingest_program_document
from questionnaire import analyze_questionnaire
from settings import DEFAULT_SETTINGS, load_settings
from text_extraction import DocumentExtractionError, load_reference_corpus, load_source_document
from utils import build_output_subdir
from writers import (
    write_analysis_json,
    write_canonical_csv,
    write_ingestion_json,
    write_questionnaire_json,
    write_results_csv,
    write_results_jsonl,
)

logger = logging.getLogger("assess")


def setup_logging(level: int = logging.INFO, logfile: Optional[Path] = None) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        handlers=handlers,
    )


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Assess a pre-inspection questionnaire against a regulatory checklist")
    parser.add_argument("--piq", required=True, help="Path to the submission (.txt, .md, .pdf or .docx)")
    parser.add_argument("--refs", default=None, help="Folder of reference documents to search for evidence")
    parser.add_argument("--program-doc", default=None, help="Programme document to infer questionnaire answers from")
    parser.add_argument("--out-dir", default=None, help="Output directory (default: output/<submission>_output)")
    parser.add_argument("--checklist", default=None, help="Optional checklist JSON (default: GDC Standards for Education)")
    parser.add_argument("--settings", default=None, help="Optional JSON file of analysis setting overrides")
    parser.add_argument("--format", choices=["json", "jsonl", "csv"], default="json", help="Format for requirement results")
    parser.add_argument("--keep-boilerplate", action="store_true", help="Keep questionnaire template wording in narratives (default: stripped)")
    parser.add_argument("--questionnaire", action="store_true", help="Also write the questionnaire answer review")
    parser.add_argument("--validate", action="store_true", default=True, help="Report canonical coverage (default: enabled)")
    parser.add_argument("--no-validate", action="store_false", dest="validate", help="Skip the canonical coverage report")
    parser.add_argument("--log-level", default="INFO", help="Set log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-file", default=None, help="Optional log file path")
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(level=level, logfile=Path(args.log_file) if args.log_file else None)

    piq_path = Path(args.piq)
    if not piq_path.exists():
        logger.error("Submission file not found: %s", piq_path)
        return 1
    if args.refs and not Path(args.refs).is_dir():
        logger.error("Reference folder not found: %s", args.refs)
        return 1

    try:
        checklist = load_checklist(args.checklist) if args.checklist else DEFAULT_CHECKLIST
        settings = load_settings(args.settings) if args.settings else DEFAULT_SETTINGS
        if args.keep_boilerplate:
            settings = dataclasses.replace(settings, strip_boilerplate=False)
        submission = load_source_document(piq_path)
        references = load_reference_corpus(args.refs) if args.refs else []
        program_doc = load_source_document(args.program_doc) if args.program_doc else None
    except (ChecklistConfigError, DocumentExtractionError, ValueError, OSError) as e:
        logger.error("Failed to prepare inputs: %s", e)
        return 2

    result = analyze_submission(submission, references, checklist, settings)

    out_dir = Path(args.out_dir) if args.out_dir else build_output_subdir(piq_path.stem)
    out_dir.mkdir(parents=True, exist_ok=True)
    if args.format == "json":
        written = write_analysis_json(result, out_dir)
    elif args.format == "jsonl":
        written = out_dir / f"{piq_path.stem}_results.jsonl"
        write_results_jsonl(result.requirement_results, written)
    else:
        written = out_dir / f"{piq_path.stem}_results.csv"
        write_results_csv(result.requirement_results, written)
    logger.info("Wrote requirement results to %s", written)

    write_canonical_csv(result.canonical, out_dir / f"{piq_path.stem}_canonical.csv")

    if args.questionnaire:
        review = analyze_questionnaire(submission, references, checklist, settings, model=result.canonical)
        review_path = out_dir / f"{piq_path.stem}_questionnaire.json"
        write_questionnaire_json(review, review_path)
        logger.info("Questionnaire completeness %d%% written to %s", review.overall_completeness, review_path)

    if program_doc is not None:
        ingestion = ingest_program_document(program_doc, checklist)
        ingestion_path = out_dir / f"{piq_path.stem}_ingested.json"
        write_ingestion_json(ingestion, ingestion_path)
        logger.info("Inferred %d answers from %s, written to %s", len(ingestion.inferred), program_doc.name, ingestion_path)

    if args.validate:
        validation = validate_canonical_coverage(result.canonical)
        save_validation_results(validation, out_dir)
        print_validation_report(validation)

    counts = result.summary["status_counts"]
    print(f"Compliance score: {result.summary['compliance_score']}% "
          f"(met {counts['met']}, partially-met {counts['partially-met']}, unknown {counts['unknown']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
