"""
Content extraction for newly arrived files.

Word documents are decoded with python-docx, PDFs with pypdf, anything
else is read as UTF-8 text. A decoder whose library is not installed
degrades to a placeholder describing the file instead of failing.
"""

from __future__ import annotations

import importlib.util
import io
from pathlib import Path
from typing import Optional

from loguru import logger

from app.utils.helpers import get_file_extension
from domains.folder_watch.models import ExtractionResult, FileCategory, PrintMode

WORD_EXTENSIONS = {"docx", "doc"}
PDF_EXTENSIONS = {"pdf"}


def categorize(path: Path) -> FileCategory:
    """Map a file path to its category by extension."""
    extension = get_file_extension(path)
    if extension in WORD_EXTENSIONS:
        return FileCategory.WORD
    if extension in PDF_EXTENSIONS:
        return FileCategory.PDF
    return FileCategory.GENERIC


class DocumentDecoder:
    """Base for format decoders backed by an optional third-party library."""

    #: Importable module providing the decoder
    module: str = ""
    #: Distribution name to suggest when the module is missing
    package: str = ""

    def __init__(self, available: Optional[bool] = None):
        """
        Initialize decoder.

        Args:
            available: Force availability (None = probe for the module)
        """
        self._available = available

    def is_available(self) -> bool:
        """Check whether the backing library can be imported."""
        if self._available is None:
            self._available = importlib.util.find_spec(self.module) is not None
        return self._available


class WordDecoder(DocumentDecoder):
    """Extract paragraph text from Word documents."""

    module = "docx"
    package = "python-docx"

    def decode(self, path: Path) -> str:
        import docx

        document = docx.Document(str(path))
        return "\n".join(paragraph.text for paragraph in document.paragraphs)


class PdfDecoder(DocumentDecoder):
    """Extract page text from PDF bytes."""

    module = "pypdf"
    package = "pypdf"

    def decode(self, data: bytes) -> str:
        from pypdf import PdfReader

        reader = PdfReader(io.BytesIO(data))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                text_parts.append(page_text)
        return "\n\n".join(text_parts).strip()


class ContentExtractor:
    """Produce a textual representation of a file for display and printing."""

    def __init__(
        self,
        word_decoder: Optional[WordDecoder] = None,
        pdf_decoder: Optional[PdfDecoder] = None,
    ):
        self.word_decoder = word_decoder or WordDecoder()
        self.pdf_decoder = pdf_decoder or PdfDecoder()

    def extract(self, path: Path) -> ExtractionResult:
        """
        Extract content from ``path``.

        Decoding problems become placeholder text. Errors reading the
        file itself (e.g. it vanished) propagate to the caller.

        Args:
            path: File to extract

        Returns:
            ExtractionResult with text, size and print mode
        """
        category = categorize(path)

        if category is FileCategory.WORD:
            return self._extract_word(path)
        if category is FileCategory.PDF:
            return self._extract_pdf(path)
        return self._extract_generic(path)

    def _extract_word(self, path: Path) -> ExtractionResult:
        if not self.word_decoder.is_available():
            content = (
                f"[Word document detected but {self.word_decoder.package} library not available]\n"
                f"File: {path.name}\n"
                f"Install with: pip install {self.word_decoder.package}"
            )
            return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

        try:
            text = self.word_decoder.decode(path)
        except Exception as e:
            logger.warning(f"Word decoding failed for {path.name}: {e}")
            content = f"[Could not extract text from Word document: {e}]"
            return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

        if not text.strip():
            content = "[Could not extract text from Word document]"
            return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

        return ExtractionResult(text, len(text), PrintMode.TEXT)

    def _extract_pdf(self, path: Path) -> ExtractionResult:
        if not self.pdf_decoder.is_available():
            size = path.stat().st_size
            content = (
                "[PDF Document Detected]\n"
                f"File: {path.name}\n"
                f"Size: {size} bytes\n"
                "\n"
                "Note: Full PDF text extraction requires additional libraries.\n"
                f"To read PDF content, install: pip install {self.pdf_decoder.package}\n"
                "For now, the file has been detected and can be moved to the processed folder."
            )
            return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

        data = path.read_bytes()
        try:
            text = self.pdf_decoder.decode(data)
        except Exception as e:
            logger.warning(f"PDF decoding failed for {path.name}: {e}")
            content = f"[Error extracting PDF text: {e}]"
            return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

        content = text or "[PDF contains no extractable text]"
        return ExtractionResult(content, len(content), PrintMode.ORIGINAL_DOCUMENT)

    def _extract_generic(self, path: Path) -> ExtractionResult:
        data = path.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            size = len(data)
            content = (
                f"[Binary file - {size} bytes]\n"
                "Use a specialized application to view this file type."
            )
            return ExtractionResult(content, size, PrintMode.SKIP, binary=True)

        return ExtractionResult(text, len(text), PrintMode.TEXT)
