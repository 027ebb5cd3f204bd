# studyspace/core/services/document_loader.py
import html
import logging
import re
from typing import Callable, Optional, Union

import httpx

from studyspace.core.services.pdf_renderer import PdfRenderError, PdfRenderer
from studyspace.core.services.recency import RecencyTracker
from studyspace.core.state import DocumentDescriptor, DocumentKind, SessionState, ZOOM_STEP
from studyspace.core.storage import StorageAdapter, StorageKey, StoredDocument

YOUTUBE_ID_PATTERN = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)")
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
PDF_LOAD_FAILED_NOTICE = "Could not load the PDF."


class UnsupportedDocumentError(ValueError):
    pass


def resolve_video_id(source: str) -> str:
    """Return the YouTube id from a watch?v= or youtu.be link, or the source itself."""
    match = YOUTUBE_ID_PATTERN.search(source)
    return match.group(1) if match else source


def render_text_html(text: str) -> str:
    return f"<p>{html.escape(text)}</p>"


class DocumentLoader:
    def __init__(
        self,
        state: SessionState,
        storage: StorageAdapter,
        recency: RecencyTracker,
        renderer: Optional[PdfRenderer] = None,
        notify: Optional[Callable[[str], None]] = None,
        extract_page_limit: int = 5,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.state = state
        self.storage = storage
        self.recency = recency
        self.renderer = renderer or PdfRenderer()
        self.notify = notify or (lambda message: None)
        self.extract_page_limit = extract_page_limit
        self.timeout = timeout
        self.transport = transport
        self.pdf = None

    async def load_document(self, kind: Union[DocumentKind, str], source: Union[bytes, str], title: str) -> bool:
        """Load a document into the session.

        Returns False when the PDF could not be fetched or parsed; the session is
        left exactly as it was and a notice is queued. Raises
        UnsupportedDocumentError for an unknown kind or a source of the wrong shape.
        """
        try:
            kind = DocumentKind(kind)
        except ValueError:
            raise UnsupportedDocumentError(f"Unsupported document kind: {kind!r}") from None
        if isinstance(source, bytearray):
            source = bytes(source)
        descriptor = DocumentDescriptor(kind=kind, source=source, title=title)

        if kind == DocumentKind.PDF:
            if not self._is_pdf_source(source):
                raise UnsupportedDocumentError("A PDF source must be file bytes or an http(s) URL.")
            try:
                data = source if isinstance(source, bytes) else await self._fetch(source)
                reader = self.renderer.open(data)
                total_pages = self.renderer.page_count(reader)
                first_page = self.renderer.render_page(reader, 1, self.state.zoom_scale)
                extracted_text = self.renderer.extract_text(reader, self.extract_page_limit)
            except (httpx.HTTPError, PdfRenderError) as e:
                logging.error(f"Error loading PDF '{title}': {e}")
                self.notify(PDF_LOAD_FAILED_NOTICE)
                return False
            self.pdf = reader
            self.state.set_document(descriptor, total_pages=total_pages, extracted_text=extracted_text, rendered_page=first_page)
            logging.info(f"PDF loaded: '{title}' ({total_pages} pages)")
        elif kind == DocumentKind.VIDEO:
            if not isinstance(source, str) or not source.strip():
                raise UnsupportedDocumentError("A video source must be a URL or video id.")
            embed_url = YOUTUBE_EMBED_URL.format(video_id=resolve_video_id(source.strip()))
            self.pdf = None
            self.state.set_document(descriptor, embed_url=embed_url)
        else:
            if not isinstance(source, str):
                raise UnsupportedDocumentError("A text source must be a string.")
            self.pdf = None
            self.state.set_document(descriptor, text_html=render_text_html(source))

        self._persist(descriptor)
        return True

    def _is_pdf_source(self, source) -> bool:
        if isinstance(source, bytes):
            return True
        return isinstance(source, str) and source.startswith(("http://", "https://"))

    async def _fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content

    def _persist(self, descriptor: DocumentDescriptor) -> None:
        self.storage.set(StorageKey.LAST_DOCUMENT, StoredDocument(
            kind=descriptor.kind, source=descriptor.storable_source, title=descriptor.title,
        ))
        self.storage.set(StorageKey.CURRENT_PAGE, self.state.current_page)
        self.recency.record_opened(descriptor, self.state.current_page)

    def next_page(self) -> bool:
        return self._go_to(self.state.current_page + 1)

    def prev_page(self) -> bool:
        return self._go_to(self.state.current_page - 1)

    def go_to_page(self, page_number) -> bool:
        if isinstance(page_number, float) and not page_number.is_integer():
            return False
        try:
            page_number = int(page_number)
        except (TypeError, ValueError):
            return False
        return self._go_to(page_number)

    def zoom_in(self) -> bool:
        return self._zoom(ZOOM_STEP)

    def zoom_out(self) -> bool:
        return self._zoom(-ZOOM_STEP)

    def _go_to(self, page_number: int) -> bool:
        if not self.state.go_to(page_number):
            return False
        self.storage.set(StorageKey.CURRENT_PAGE, self.state.current_page)
        self._render_current_page()
        return True

    def _zoom(self, delta: float) -> bool:
        if not self.state.zoom_by(delta):
            return False
        self._render_current_page()
        return True

    def _render_current_page(self) -> None:
        if self.pdf is None:
            return
        try:
            self.state.show_page(self.renderer.render_page(self.pdf, self.state.current_page, self.state.zoom_scale))
        except PdfRenderError as e:
            logging.error(f"Error rendering page {self.state.current_page}: {e}")
