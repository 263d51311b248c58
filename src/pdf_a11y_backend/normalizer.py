"""
Format normalization: make sure every upload reaches the remote service as PDF.

Word documents are converted to HTML with mammoth and the HTML is printed to
PDF in a headless Chromium page driven by Playwright. Anything else is
forwarded untouched. Fidelity of both conversions is entirely up to the
underlying libraries.
"""

from __future__ import annotations

import io
import logging
from typing import Protocol

import mammoth
from playwright.sync_api import sync_playwright

from .errors import NormalizationError, UnsupportedDocumentError
from .models import ConversionResult, UploadedFile

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCX_EXTENSION = ".docx"
PDF_MAGIC = b"%PDF-"


class HtmlConverter(Protocol):
    def convert(self, content: bytes) -> str:
        ...


class PdfRenderer(Protocol):
    def render(self, html: str, page_format: str) -> bytes:
        """Render an HTML string to PDF bytes. Blocks until the browser is done."""


class MammothHtmlConverter:
    def convert(self, content: bytes) -> str:
        result = mammoth.convert_to_html(io.BytesIO(content))
        for message in result.messages:
            logger.debug(f"mammoth: {message}")
        return result.value


class PlaywrightPdfRenderer:
    def __init__(self, launch_options: dict | None = None) -> None:
        self._launch_options = launch_options or {}

    def render(self, html: str, page_format: str) -> bytes:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(**self._launch_options)
            try:
                page = browser.new_page()
                page.set_content(html)
                return page.pdf(format=page_format)
            finally:
                browser.close()


def is_word_document(filename: str | None, content_type: str | None) -> bool:
    return content_type == DOCX_MEDIA_TYPE or (filename or "").endswith(DOCX_EXTENSION)


class DocumentNormalizer:
    """
    Turn an uploaded file into PDF bytes.

    Args:
        html_converter: Word-to-HTML converter (mammoth by default)
        pdf_renderer: HTML-to-PDF renderer (Playwright Chromium by default)
        page_format: Paper size passed to the renderer
        validate_pdf_header: Reject pass-through uploads that do not start with %PDF-
    """

    def __init__(
        self,
        html_converter: HtmlConverter | None = None,
        pdf_renderer: PdfRenderer | None = None,
        page_format: str = "A4",
        validate_pdf_header: bool = False,
    ) -> None:
        self.html_converter = html_converter or MammothHtmlConverter()
        self.pdf_renderer = pdf_renderer or PlaywrightPdfRenderer()
        self.page_format = page_format
        self.validate_pdf_header = validate_pdf_header

    def normalize(self, upload: UploadedFile) -> ConversionResult:
        if is_word_document(upload.filename, upload.content_type):
            return self._convert_word(upload)

        if not upload.content.startswith(PDF_MAGIC):
            if self.validate_pdf_header:
                raise UnsupportedDocumentError(f"{upload.filename} is not a PDF document")
            logger.warning(f"{upload.filename} does not look like a PDF; forwarding as-is")

        return ConversionResult(content=upload.content, source_filename=upload.filename)

    def _convert_word(self, upload: UploadedFile) -> ConversionResult:
        logger.info(f"Converting Word document {upload.filename} to PDF ({self.page_format})")
        try:
            html = self.html_converter.convert(upload.content)
            pdf_bytes = self.pdf_renderer.render(html, self.page_format)
        except Exception as exc:
            raise NormalizationError(f"Could not convert {upload.filename} to PDF: {exc}") from exc

        logger.info(f"Rendered {upload.filename} to {len(pdf_bytes)} PDF bytes")
        return ConversionResult(content=pdf_bytes, source_filename=upload.filename, converted=True)
