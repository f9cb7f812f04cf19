"""Plain-text extraction from uploaded contract documents."""

import io
import logging
from pathlib import Path
from typing import Iterable, Optional
from zipfile import BadZipFile

import pdfplumber
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..interfaces.extractor import ITextExtractor
from ..models.contract import UploadedFile
from .exceptions import ExtractionError, FileTooLargeError, UnsupportedFormatError


logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt")


def placeholder_text(filename: str) -> str:
    """Text used when a document yields no readable content."""
    return f"[PDF Content from {filename}]"


class DocumentTextExtractor(ITextExtractor):
    """
    Extracts plain text from uploaded PDF, Word and text files.

    Uses pdfplumber for PDF text and falls back to PyPDF2 when pdfplumber
    cannot read the file. Unreadable documents are not fatal: a placeholder
    naming the file is returned instead so the upload can continue.
    """

    def __init__(
        self,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
    ):
        self.max_upload_bytes = max_upload_bytes
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)

    def extract(self, file: UploadedFile) -> str:
        """
        Extract plain text from an uploaded document.

        Args:
            file: The uploaded document.

        Returns:
            The document text, or a placeholder if nothing could be read.

        Raises:
            UnsupportedFormatError: If the file extension is not accepted.
            FileTooLargeError: If the file exceeds the upload limit.
        """
        suffix = self.validate(file)

        try:
            if suffix == ".pdf":
                text = self._extract_pdf(file)
            elif suffix == ".docx":
                text = self._extract_docx(file)
            else:
                text = self._decode_text(file.content)
        except ExtractionError as e:
            logger.warning(f"Text extraction failed, using placeholder: {e}")
            return placeholder_text(file.filename)

        if not text.strip():
            logger.warning(f"No readable text found in {file.filename}, using placeholder")
            return placeholder_text(file.filename)

        logger.info(f"Extracted {len(text)} characters from {file.filename}")
        return text

    def validate(self, file: UploadedFile) -> str:
        """Check type and size of an upload and return its lowercase suffix."""
        suffix = Path(file.filename).suffix.lower()
        if suffix not in self.allowed_extensions:
            raise UnsupportedFormatError(
                message=f"Unsupported file format: {suffix or '(none)'}",
                filename=file.filename,
                location="file extension",
                details={"supported_formats": list(self.allowed_extensions)},
            )
        if file.size > self.max_upload_bytes:
            raise FileTooLargeError(
                message=f"File is larger than {self.max_upload_bytes} bytes",
                filename=file.filename,
                details={"max_bytes": self.max_upload_bytes, "size": file.size},
            )
        return suffix

    def _extract_pdf(self, file: UploadedFile) -> str:
        """Extract text from every page of a PDF."""
        try:
            with pdfplumber.open(io.BytesIO(file.content)) as pdf:
                text_parts = []
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        text_parts.append(page_text)
                return "\n\n".join(text_parts)
        except Exception as e:
            logger.debug(f"pdfplumber could not read {file.filename}: {e}")

        # Fall back to PyPDF2 for files pdfplumber rejects
        try:
            reader = PdfReader(io.BytesIO(file.content))
            return "\n".join((page.extract_text() or "") for page in reader.pages)
        except PdfReadError as e:
            raise ExtractionError(
                message="PDF file is corrupted or encrypted",
                filename=file.filename,
                location="file header",
                details={"original_error": str(e)},
            )
        except Exception as e:
            raise ExtractionError(
                message=f"Failed to read PDF: {str(e)}",
                filename=file.filename,
                details={"original_error": str(e)},
            )

    def _extract_docx(self, file: UploadedFile) -> str:
        """Extract paragraph text from a Word document."""
        try:
            doc = Document(io.BytesIO(file.content))
        except (BadZipFile, PackageNotFoundError, KeyError, ValueError) as e:
            raise ExtractionError(
                message="Document is corrupted or not a valid Word file",
                filename=file.filename,
                location="file header",
                details={"original_error": str(e)},
            )
        return "\n".join(paragraph.text for paragraph in doc.paragraphs)

    @staticmethod
    def _decode_text(content: bytes, encoding: Optional[str] = None) -> str:
        """Decode plain text, falling back to latin-1."""
        try:
            return content.decode(encoding or "utf-8")
        except UnicodeDecodeError:
            return content.decode("latin-1")
