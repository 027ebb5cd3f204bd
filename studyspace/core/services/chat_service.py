# studyspace/core/services/chat_service.py
import logging
from typing import Optional

from groq import Groq


class ChatServiceError(Exception):
    pass


class ChatService:
    """Completes study-assistant prompts with a Groq-hosted model."""

    def __init__(self, api_key: Optional[str], model: str = "llama-3.1-8b-instant"):
        self.model = model
        self.groq_client = Groq(api_key=api_key) if api_key else None

    @property
    def configured(self) -> bool:
        return self.groq_client is not None

    def complete(self, prompt: str, temperature: float = 0.7) -> str:
        if self.groq_client is None:
            raise ChatServiceError("API key not configured.")
        try:
            chat_completion = self.groq_client.chat.completions.create(
                messages=[{"role": "user", "content": prompt}],
                model=self.model,
                temperature=temperature,
            )
        except Exception as e:
            logging.error(f"Error generating answer with LLM: {e}")
            raise ChatServiceError(f"Upstream model error: {e}") from e
        return chat_completion.choices[0].message.content or ""
