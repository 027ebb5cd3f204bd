# studyspace/core/services/study_space.py
import logging
from collections import deque
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Union

import httpx

from studyspace.core.services.conversation import ConversationGateway
from studyspace.core.services.document_loader import DocumentLoader
from studyspace.core.services.pdf_renderer import PdfRenderer
from studyspace.core.services.recency import RecencyTracker
from studyspace.core.state import ChatEntry, DocumentKind, PanelTab, SessionState, Theme
from studyspace.core.storage import RecentDocumentEntry, StorageAdapter, StorageKey, StoredDocument

MAX_NOTICES = 20


class StudySpace:
    """Command interface of the study space: one session, its storage and its AI gateway."""

    def __init__(
        self,
        storage: StorageAdapter,
        chat_api_url: str,
        renderer: Optional[PdfRenderer] = None,
        chat_temperature: float = 0.7,
        extract_page_limit: int = 5,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.state = SessionState()
        self.storage = storage
        self.notices = deque(maxlen=MAX_NOTICES)
        self.recency = RecencyTracker(storage)
        self.loader = DocumentLoader(
            self.state,
            storage,
            self.recency,
            renderer=renderer,
            notify=self.notify,
            extract_page_limit=extract_page_limit,
            timeout=timeout,
            transport=transport,
        )
        self.gateway = ConversationGateway(
            self.state, chat_api_url, temperature=chat_temperature, timeout=timeout, transport=transport,
        )
        self.last_document: Optional[StoredDocument] = None
        self.last_page: Optional[int] = None

    def notify(self, message: str) -> None:
        logging.info(f"Notice: {message}")
        self.notices.append(message)

    def pop_notices(self) -> List[str]:
        notices = list(self.notices)
        self.notices.clear()
        return notices

    def restore(self) -> None:
        """Pick up the theme and the last opened document from storage."""
        theme = self.storage.get(StorageKey.THEME)
        if theme is not None:
            self.state.set_theme(theme)
        self.last_document = self.storage.get(StorageKey.LAST_DOCUMENT)
        self.last_page = self.storage.get(StorageKey.CURRENT_PAGE) if self.last_document else None
        if self.last_document:
            logging.info(f"Loaded from storage: '{self.last_document.title}' (page {self.last_page or 1})")

    def toggle_theme(self) -> Theme:
        theme = Theme.DARK if self.state.theme == Theme.LIGHT else Theme.LIGHT
        self.state.set_theme(theme)
        self.storage.set(StorageKey.THEME, theme)
        return theme

    def switch_tab(self, tab: Union[PanelTab, str]) -> None:
        self.state.select_tab(tab)

    async def load_document(self, kind: Union[DocumentKind, str], source: Union[bytes, str], title: str) -> bool:
        return await self.loader.load_document(kind, source, title)

    def next_page(self) -> bool:
        return self.loader.next_page()

    def prev_page(self) -> bool:
        return self.loader.prev_page()

    def go_to_page(self, page_number) -> bool:
        return self.loader.go_to_page(page_number)

    def zoom_in(self) -> bool:
        return self.loader.zoom_in()

    def zoom_out(self) -> bool:
        return self.loader.zoom_out()

    async def ask(self, message: str, token: Optional[str]) -> Optional[ChatEntry]:
        return await self.gateway.ask(message, token)

    async def summarize(self, token: Optional[str], text: Optional[str] = None) -> str:
        return await self.gateway.summarize(token, text)

    def recent_documents(self) -> List[RecentDocumentEntry]:
        return self.recency.recent()

    def snapshot(self) -> Dict[str, Any]:
        state = self.state
        document = state.current_document
        return {
            "current_document": {
                "kind": document.kind.value,
                "title": document.title,
                "source": document.storable_source,
            } if document else None,
            "current_page": state.current_page,
            "total_pages": state.total_pages,
            "zoom_scale": state.zoom_scale,
            "active_panel_tab": state.active_panel_tab.value,
            "theme": state.theme.value,
            "chat_transcript": [
                {"role": entry.role.value, "content": entry.content, "timestamp": entry.timestamp}
                for entry in state.chat_transcript
            ],
            "summary": state.summary,
            "rendered_page": asdict(state.rendered_page) if state.rendered_page else None,
            "embed_url": state.embed_url,
            "text_html": state.text_html,
            "last_document": self.last_document.model_dump(mode="json") if self.last_document else None,
            "last_page": self.last_page,
        }
