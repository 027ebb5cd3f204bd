# studyspace/core/config.py
from pydantic_settings import BaseSettings
from typing import List, Optional
import os

class Settings(BaseSettings):
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.1-8b-instant"
    # Bearer tokens accepted by the chat endpoint. Empty means any token is accepted.
    chat_access_tokens: List[str] = []
    api_base_url: str = "http://localhost:8000"
    chat_endpoint: str = "/api/v1/chat"
    chat_temperature: float = 0.7
    request_timeout: float = 60.0
    extract_page_limit: int = 5
    storage_path: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..", "data", "study_storage.json")
    log_level: str = "INFO"

    @property
    def chat_api_url(self) -> str:
        return self.api_base_url.rstrip("/") + self.chat_endpoint

    class Config:
        env_file = ".env"

settings = Settings()
