# studyspace/core/services/pdf_renderer.py
import io
from typing import Optional

from pypdf import PdfReader

from studyspace.core.state import RenderedPage


class PdfRenderError(Exception):
    pass


class PdfRenderer:
    """Thin wrapper over pypdf: open a document, lay out one page, pull text."""

    def open(self, data: bytes) -> PdfReader:
        try:
            reader = PdfReader(io.BytesIO(data))
            # pypdf parses lazily, touching the page tree surfaces broken files here
            if len(reader.pages) == 0:
                raise PdfRenderError("PDF has no pages")
        except PdfRenderError:
            raise
        except Exception as e:
            raise PdfRenderError(f"Could not parse PDF: {e}") from e
        return reader

    def page_count(self, reader: PdfReader) -> int:
        return len(reader.pages)

    def render_page(self, reader: PdfReader, page_number: int, scale: float) -> RenderedPage:
        try:
            page = reader.pages[page_number - 1]
            width = float(page.mediabox.width) * scale
            height = float(page.mediabox.height) * scale
            text = page.extract_text() or ""
        except Exception as e:
            raise PdfRenderError(f"Could not render page {page_number}: {e}") from e
        return RenderedPage(page_number=page_number, scale=scale, width=width, height=height, text=text)

    def extract_text(self, reader: PdfReader, max_pages: Optional[int] = None) -> str:
        """Concatenate the text of the first max_pages pages, skipping pages without text."""
        count = len(reader.pages)
        if max_pages is not None:
            count = min(count, max_pages)
        texts = []
        for i in range(count):
            try:
                text = reader.pages[i].extract_text()
            except Exception as e:
                raise PdfRenderError(f"Could not extract text: {e}") from e
            if text:
                texts.append(text)
        return "\n".join(texts)
