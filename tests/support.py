# tests/support.py
import io
import httpx
from pypdf import PdfWriter
from studyspace.core.services.pdf_renderer import PdfRenderError, PdfRenderer
from studyspace.core.state import RenderedPage

CHAT_URL = "http://chat.test/api/v1/chat"
FAKE_PDF = b"%PDF-fake"


def make_pdf(num_pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(num_pages):
        writer.add_blank_page(width=200, height=300)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class FakeRenderer(PdfRenderer):
    """Renderer with fixed page texts; only FAKE_PDF opens."""

    def __init__(self, page_texts):
        self.page_texts = page_texts
        self.rendered = []

    def open(self, data):
        if data != FAKE_PDF:
            raise PdfRenderError("not a PDF")
        return self

    def page_count(self, reader):
        return len(self.page_texts)

    def render_page(self, reader, page_number, scale):
        self.rendered.append((page_number, scale))
        return RenderedPage(page_number=page_number, scale=scale, width=100 * scale, height=100 * scale, text=self.page_texts[page_number - 1])

    def extract_text(self, reader, max_pages=None):
        texts = self.page_texts if max_pages is None else self.page_texts[:max_pages]
        return "\n".join(texts)


class RecordingBackend:
    """httpx.MockTransport handler that answers every request the same way."""

    def __init__(self, status_code=200, json=None, content=None, error=None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"{self.error.__name__} for {request.url}", request=request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


