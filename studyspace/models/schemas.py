# studyspace/models/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

class ImageScanRequest(BaseModel):
    imageBase64: Optional[str] = None
    mimeType: Optional[str] = None
    action: str = "scan"
    currentText: Optional[str] = None

class ScanResult(BaseModel):
    has_problem: bool = False
    problem_content: str = ""
    has_prompts: bool = False
    detected_prompts: List[str] = []

class ChatRequest(BaseModel):
    prompt: str
    temperature: float = 0.7

class ChatResponse(BaseModel):
    response: str

class AskRequest(BaseModel):
    message: str

class SummaryRequest(BaseModel):
    text: Optional[str] = None

class TabRequest(BaseModel):
    tab: str

class ChatEntryModel(BaseModel):
    role: str
    content: str
    timestamp: datetime

class DocumentModel(BaseModel):
    kind: str
    title: str
    source: Optional[str] = None

class RenderedPageModel(BaseModel):
    page_number: int
    scale: float
    width: float
    height: float
    text: str

class RecentDocumentModel(BaseModel):
    kind: str
    title: str
    source: Optional[str] = None
    timestamp: datetime
    last_page: int

class SessionResponse(BaseModel):
    current_document: Optional[DocumentModel] = None
    current_page: int
    total_pages: int
    zoom_scale: float
    active_panel_tab: str
    theme: str
    chat_transcript: List[ChatEntryModel]
    summary: str
    rendered_page: Optional[RenderedPageModel] = None
    embed_url: Optional[str] = None
    text_html: Optional[str] = None
    last_document: Optional[DocumentModel] = None
    last_page: Optional[int] = None
    changed: bool = True
    notices: List[str] = Field(default_factory=list)

class SummaryResponse(BaseModel):
    summary: str
    notices: List[str] = Field(default_factory=list)

class RecentDocumentsResponse(BaseModel):
    documents: List[RecentDocumentModel]
