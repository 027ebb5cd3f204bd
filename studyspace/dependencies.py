import threading
from functools import lru_cache
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from studyspace.core.config import settings
from studyspace.core.storage import StorageAdapter
from studyspace.core.services.chat_service import ChatService
from studyspace.core.services.image_scan import ImageScanService
from studyspace.core.services.study_space import StudySpace

bearer_scheme = HTTPBearer(auto_error=False)

@lru_cache()
def get_storage() -> StorageAdapter:
    return StorageAdapter(settings.storage_path)

_study_space_lock = threading.Lock()

def get_study_space() -> StudySpace:
    # Sync dependencies run in the threadpool; only one controller may be built.
    with _study_space_lock:
        return _build_study_space()

@lru_cache()
def _build_study_space() -> StudySpace:
    study_space = StudySpace(
        get_storage(),
        settings.chat_api_url,
        chat_temperature=settings.chat_temperature,
        extract_page_limit=settings.extract_page_limit,
        timeout=settings.request_timeout,
    )
    study_space.restore()
    return study_space

@lru_cache()
def get_chat_service() -> ChatService:
    return ChatService(settings.groq_api_key, model=settings.groq_model)

def get_image_scan_service() -> ImageScanService:
    return ImageScanService(settings.gemini_api_key, model=settings.gemini_model, base_url=settings.gemini_base_url, timeout=settings.request_timeout)

def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
    return credentials.credentials if credentials else None
