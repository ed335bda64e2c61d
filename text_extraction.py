"""Turn files on disk into SourceDocuments for the analysis pipeline.

Supported: plain text / markdown, PDF (pdfminer.six) and DOCX (python-docx).
For a PDF, a sibling ``.txt`` with the same stem is preferred when present,
since a hand-corrected extract beats layout-driven PDF text.
"""
import hashlib
import logging
from pathlib import Path
from typing import List, Optional, Union

from models import SourceDocument

try:
    from pdfminer.high_level import extract_text as _pdf_extract_text
except ImportError:  # pragma: no cover
    _pdf_extract_text = None

try:
    from docx import Document
    HAS_DOCX = True
except ImportError:  # pragma: no cover
    HAS_DOCX = False

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {'.txt', '.md'}
SUPPORTED_SUFFIXES = TEXT_SUFFIXES | {'.pdf', '.docx'}


class DocumentExtractionError(RuntimeError):
    """A supported file could not be turned into text."""


def _read_text(path: Path) -> str:
    return path.read_text(encoding='utf-8', errors='ignore')


def _extract_pdf(path: Path) -> str:
    sibling = path.with_suffix('.txt')
    if sibling.exists():
        logger.info("Using pre-extracted text %s for %s", sibling.name, path.name)
        return _read_text(sibling)
    if _pdf_extract_text is None:
        raise DocumentExtractionError("pdfminer.six not installed; please pip install pdfminer.six to enable PDF parsing")
    try:
        return _pdf_extract_text(str(path)) or ''
    except Exception as e:
        raise DocumentExtractionError(f"Failed to extract text from {path}: {e}") from e


def _extract_docx(path: Path) -> str:
    if not HAS_DOCX:
        raise DocumentExtractionError("python-docx not installed; please pip install python-docx to enable DOCX parsing")
    try:
        doc = Document(str(path))
    except Exception as e:
        raise DocumentExtractionError(f"Failed to open {path}: {e}") from e
    lines: List[str] = []
    for p in doc.paragraphs:
        if p.text and p.text.strip():
            lines.append(p.text.strip())
    # Questionnaire answers often live in table cells
    for table in doc.tables:
        for row in table.rows:
            seen = set()
            for cell in row.cells:
                txt = (cell.text or '').strip()
                # merged cells repeat their text across the row
                if txt and txt not in seen:
                    seen.add(txt)
                    lines.append(txt)
    return '\n'.join(lines)


def extract_text(path: Union[str, Path]) -> str:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return _read_text(path)
    if suffix == '.pdf':
        return _extract_pdf(path)
    if suffix == '.docx':
        return _extract_docx(path)
    raise ValueError(f"Unsupported file type '{suffix}' for {path}")


def document_id_for(path: Path) -> str:
    """Stable id derived from the file name, so repeat runs over the same file share an id."""
    digest = hashlib.sha1(path.name.encode('utf-8')).hexdigest()[:8]
    return f"{path.stem}-{digest}"


def load_source_document(path: Union[str, Path], source_url: Optional[str] = None) -> SourceDocument:
    path = Path(path)
    text = extract_text(path)
    logger.info("Extracted %d characters from %s", len(text), path.name)
    return SourceDocument(id=document_id_for(path), name=path.name, extracted_text=text, source_url=source_url)


def load_reference_corpus(folder: Union[str, Path]) -> List[SourceDocument]:
    """Load every supported file in ``folder`` (sorted by name).

    Unsupported files and files that fail to extract are skipped with a
    warning. A ``.txt`` sitting next to a ``.pdf`` of the same stem is only
    used as that PDF's text, not loaded twice.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Reference folder not found: {folder}")
    files = sorted(p for p in folder.iterdir() if p.is_file())
    pdf_stems = {p.stem for p in files if p.suffix.lower() == '.pdf'}
    docs = []
    for path in files:
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            logger.warning("Skipping unsupported reference file: %s", path.name)
            continue
        if suffix == '.txt' and path.stem in pdf_stems:
            continue
        try:
            docs.append(load_source_document(path))
        except DocumentExtractionError as e:
            logger.warning("Skipping %s: %s", path.name, e)
    logger.info("Loaded %d reference documents from %s", len(docs), folder)
    return docs
