# studyspace/api/v1/endpoints/session.py
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from studyspace.core.services.document_loader import UnsupportedDocumentError
from studyspace.core.services.study_space import StudySpace
from studyspace.core.state import PanelTab
from studyspace.dependencies import get_bearer_token, get_study_space
from studyspace.models.schemas import (
    AskRequest, RecentDocumentsResponse, SessionResponse, SummaryRequest, SummaryResponse, TabRequest,
)

router = APIRouter()

def _session_response(study_space: StudySpace, changed: bool = True) -> SessionResponse:
    return SessionResponse(**study_space.snapshot(), changed=changed, notices=study_space.pop_notices())

@router.get("", response_model=SessionResponse)
async def get_session(study_space: StudySpace = Depends(get_study_space)):
    """Current document, view position, chat transcript and pending notices."""
    return _session_response(study_space)

@router.post("/documents", response_model=SessionResponse)
async def load_document(
    kind: str = Form(...),
    title: Optional[str] = Form(None),
    source: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    study_space: StudySpace = Depends(get_study_space)
):
    """Open a PDF (upload or URL), a video link or a block of text in the viewer."""
    if file is not None:
        document_source = await file.read()
        title = title or file.filename
    elif source is not None:
        document_source = source
    else:
        raise HTTPException(status_code=400, detail="Provide either a file or a source.")
    if not title:
        raise HTTPException(status_code=400, detail="A document title is required.")
    try:
        loaded = await study_space.load_document(kind, document_source, title)
    except UnsupportedDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_response(study_space, changed=loaded)

@router.post("/pages/next", response_model=SessionResponse)
async def next_page(study_space: StudySpace = Depends(get_study_space)):
    return _session_response(study_space, changed=study_space.next_page())

@router.post("/pages/prev", response_model=SessionResponse)
async def prev_page(study_space: StudySpace = Depends(get_study_space)):
    return _session_response(study_space, changed=study_space.prev_page())

@router.put("/pages/{page_number}", response_model=SessionResponse)
async def go_to_page(page_number: str, study_space: StudySpace = Depends(get_study_space)):
    """Jump to a page. Pages outside the document, or that are not whole numbers, are ignored rather than rejected."""
    return _session_response(study_space, changed=study_space.go_to_page(page_number))

@router.post("/zoom/in", response_model=SessionResponse)
async def zoom_in(study_space: StudySpace = Depends(get_study_space)):
    return _session_response(study_space, changed=study_space.zoom_in())

@router.post("/zoom/out", response_model=SessionResponse)
async def zoom_out(study_space: StudySpace = Depends(get_study_space)):
    return _session_response(study_space, changed=study_space.zoom_out())

@router.put("/tab", response_model=SessionResponse)
async def switch_tab(request: TabRequest, study_space: StudySpace = Depends(get_study_space)):
    try:
        tab = PanelTab(request.tab)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown panel tab: {request.tab}")
    study_space.switch_tab(tab)
    return _session_response(study_space)

@router.post("/theme/toggle", response_model=SessionResponse)
async def toggle_theme(study_space: StudySpace = Depends(get_study_space)):
    study_space.toggle_theme()
    return _session_response(study_space)

@router.post("/chat", response_model=SessionResponse)
async def ask(
    request: AskRequest,
    token: Optional[str] = Depends(get_bearer_token),
    study_space: StudySpace = Depends(get_study_space)
):
    """Ask the AI assistant about the open document. The caller's bearer token is forwarded."""
    entry = await study_space.ask(request.message, token)
    return _session_response(study_space, changed=entry is not None)

@router.post("/summary", response_model=SummaryResponse)
async def summarize(
    request: SummaryRequest,
    token: Optional[str] = Depends(get_bearer_token),
    study_space: StudySpace = Depends(get_study_space)
):
    summary = await study_space.summarize(token, request.text)
    return SummaryResponse(summary=summary, notices=study_space.pop_notices())

@router.get("/recent", response_model=RecentDocumentsResponse)
async def recent_documents(study_space: StudySpace = Depends(get_study_space)):
    """Recently opened documents, most recent first."""
    return RecentDocumentsResponse(documents=[entry.model_dump(mode="json") for entry in study_space.recent_documents()])
