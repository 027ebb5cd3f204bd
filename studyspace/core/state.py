# studyspace/core/state.py

# In-memory state of one study session. The StudySpace controller owns the
# only instance; every change goes through the methods below so the page,
# zoom and chat invariants hold no matter who calls them.

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple, Union

ZOOM_MIN = 0.5
ZOOM_MAX = 3.0
ZOOM_STEP = 0.2
DEFAULT_ZOOM = 1.5


class DocumentKind(str, Enum):
    PDF = "pdf"
    VIDEO = "video"
    TEXT = "text"


class PanelTab(str, Enum):
    CHAT = "chat"
    SUMMARY = "summary"
    TOOLS = "tools"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class DocumentDescriptor:
    kind: DocumentKind
    source: Union[bytes, str]
    title: str

    @property
    def storable_source(self) -> Optional[str]:
        """Binary sources cannot be persisted, only URLs and raw text can."""
        return self.source if isinstance(self.source, str) else None


@dataclass(frozen=True)
class ChatEntry:
    role: ChatRole
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RenderedPage:
    page_number: int
    scale: float
    width: float
    height: float
    text: str


class SessionState:
    def __init__(self):
        self._current_document: Optional[DocumentDescriptor] = None
        self._current_page = 1
        self._total_pages = 0
        self._zoom_scale = DEFAULT_ZOOM
        self._extracted_text = ""
        self._chat_transcript: List[ChatEntry] = []
        self._active_panel_tab = PanelTab.CHAT
        self._summary = ""
        self._theme = Theme.LIGHT
        self._rendered_page: Optional[RenderedPage] = None
        self._embed_url: Optional[str] = None
        self._text_html: Optional[str] = None

    @property
    def current_document(self) -> Optional[DocumentDescriptor]:
        return self._current_document

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def zoom_scale(self) -> float:
        return self._zoom_scale

    @property
    def extracted_text(self) -> str:
        return self._extracted_text

    @property
    def chat_transcript(self) -> Tuple[ChatEntry, ...]:
        return tuple(self._chat_transcript)

    @property
    def active_panel_tab(self) -> PanelTab:
        return self._active_panel_tab

    @property
    def summary(self) -> str:
        return self._summary

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def rendered_page(self) -> Optional[RenderedPage]:
        return self._rendered_page

    @property
    def embed_url(self) -> Optional[str]:
        return self._embed_url

    @property
    def text_html(self) -> Optional[str]:
        return self._text_html

    def set_document(
        self,
        descriptor: DocumentDescriptor,
        total_pages: int = 0,
        extracted_text: str = "",
        rendered_page: Optional[RenderedPage] = None,
        embed_url: Optional[str] = None,
        text_html: Optional[str] = None,
    ) -> None:
        """Swap in a freshly loaded document and reset everything tied to the old one."""
        if total_pages < 0:
            raise ValueError(f"total_pages must be >= 0, got {total_pages}")
        self._current_document = descriptor
        self._total_pages = total_pages
        self._current_page = 1
        self._extracted_text = extracted_text
        self._rendered_page = rendered_page
        self._embed_url = embed_url
        self._text_html = text_html
        self._summary = ""
        self.clear_chat()
        self._active_panel_tab = PanelTab.CHAT

    def go_to(self, page_number: int) -> bool:
        if page_number == self._current_page or not 1 <= page_number <= self._total_pages:
            return False
        self._current_page = page_number
        return True

    def zoom_by(self, delta: float) -> bool:
        new_scale = round(min(max(self._zoom_scale + delta, ZOOM_MIN), ZOOM_MAX), 2)
        if new_scale == self._zoom_scale:
            return False
        self._zoom_scale = new_scale
        return True

    def show_page(self, rendered_page: RenderedPage) -> None:
        self._rendered_page = rendered_page

    def append_chat(self, role: ChatRole, content: str) -> ChatEntry:
        entry = ChatEntry(role=ChatRole(role), content=content)
        self._chat_transcript.append(entry)
        return entry

    def clear_chat(self) -> None:
        self._chat_transcript = []

    def select_tab(self, tab: PanelTab) -> None:
        self._active_panel_tab = PanelTab(tab)

    def set_summary(self, summary: str) -> None:
        self._summary = summary

    def set_theme(self, theme: Theme) -> None:
        self._theme = Theme(theme)
