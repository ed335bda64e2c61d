import json

import pandas as pd

from assess_cli import main


def write_inputs(tmp_path, sample_submission, reference_corpus):
    piq = tmp_path / "piq.txt"
    piq.write_text(sample_submission.extracted_text, encoding="utf-8")
    refs = tmp_path / "refs"
    refs.mkdir()
    for doc in reference_corpus:
        (refs / doc.name).write_text(doc.extracted_text, encoding="utf-8")
    return piq, refs


def test_cli_writes_outputs(tmp_path, sample_submission, reference_corpus, capsys):
    piq, refs = write_inputs(tmp_path, sample_submission, reference_corpus)
    out = tmp_path / "out"

    code = main(["--piq", str(piq), "--refs", str(refs), "--out-dir", str(out),
                 "--format", "csv", "--questionnaire"])

    assert code == 0
    df = pd.read_csv(out / "piq_results.csv")
    assert len(df) == 21
    assert (out / "piq_canonical.csv").exists()
    assert (out / "piq_questionnaire.json").exists()
    assert (out / "canonical_validation.json").exists()
    assert "Compliance score:" in capsys.readouterr().out


def test_cli_json_without_validation(tmp_path, sample_submission, reference_corpus):
    piq, refs = write_inputs(tmp_path, sample_submission, reference_corpus)
    out = tmp_path / "out"

    assert main(["--piq", str(piq), "--out-dir", str(out), "--no-validate"]) == 0
    assert len(list(out.glob("piq-*.json"))) == 1
    assert not (out / "canonical_validation.json").exists()


def test_cli_program_document(tmp_path, sample_submission, reference_corpus):
    piq, refs = write_inputs(tmp_path, sample_submission, reference_corpus)
    programme = tmp_path / "programme.txt"
    programme.write_text("Appropriate supervision is provided at one to four.\n\nThe library opens at nine.",
                         encoding="utf-8")
    out = tmp_path / "out"

    assert main(["--piq", str(piq), "--program-doc", str(programme), "--out-dir", str(out), "--no-validate"]) == 0
    ingested = json.loads((out / "piq_ingested.json").read_text(encoding="utf-8"))
    assert ingested["inferred"]["R4"].startswith("Appropriate supervision")
    assert ingested["confidence"]["R4"] > 0


def test_cli_missing_submission(tmp_path):
    assert main(["--piq", str(tmp_path / "missing.txt"), "--out-dir", str(tmp_path)]) == 1


def test_cli_bad_checklist(tmp_path, sample_submission, reference_corpus):
    piq, _ = write_inputs(tmp_path, sample_submission, reference_corpus)
    checklist = tmp_path / "checklist.json"
    checklist.write_text("{broken", encoding="utf-8")
    assert main(["--piq", str(piq), "--checklist", str(checklist), "--out-dir", str(tmp_path / "out")]) == 2
