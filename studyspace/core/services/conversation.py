# studyspace/core/services/conversation.py
import logging
from typing import Any, Optional

import httpx

from studyspace.core.state import ChatEntry, ChatRole, SessionState

CHAT_CONTEXT_LIMIT = 3000
SUMMARY_CONTEXT_LIMIT = 5000

CHAT_PREAMBLE = (
    "You are a study assistant. Use the document excerpt below to answer the "
    "student's question clearly and concisely.\n\nDocument:\n"
)
SUMMARY_PREAMBLE = (
    "You are a study assistant. Summarize the following document for a student, "
    "listing its main ideas as short bullet points.\n\nDocument:\n"
)
SIGN_IN_ADVISORY = "Please sign in to chat with the AI assistant about this document."
SUMMARY_SIGN_IN_ADVISORY = "Please sign in to generate a summary of this document."
NOTHING_TO_SUMMARIZE = "There is no document text to summarize yet."
AI_ERROR_MESSAGE = "Sorry, the AI assistant could not respond right now. Please try again."

# Ordered preference: the chat endpoint answers under "response", older deployments under "text".
RESPONSE_TEXT_FIELDS = ("response", "text")


def extract_reply(body: Any) -> Optional[str]:
    """Return the first non-empty text field of a chat endpoint response."""
    if not isinstance(body, dict):
        return None
    for name in RESPONSE_TEXT_FIELDS:
        value = body.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def build_chat_prompt(message: str, context: str) -> str:
    if not context:
        return message
    return f"{CHAT_PREAMBLE}{context[:CHAT_CONTEXT_LIMIT]}\n\nQuestion: {message}"


def build_summary_prompt(text: str) -> str:
    return f"{SUMMARY_PREAMBLE}{text[:SUMMARY_CONTEXT_LIMIT]}"


class ConversationGateway:
    """Sends chat and summary requests about the open document to the chat endpoint."""

    def __init__(
        self,
        state: SessionState,
        endpoint_url: str,
        temperature: float = 0.7,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.state = state
        self.endpoint_url = endpoint_url
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    async def ask(self, message: str, token: Optional[str]) -> Optional[ChatEntry]:
        """Append the answer to message to the transcript and return it.

        Without a token nothing is sent and only the sign-in advisory is appended.
        Otherwise the user's message and exactly one assistant entry are appended,
        the latter holding either the reply or a fixed error message.
        """
        message = (message or "").strip()
        if not message:
            return None
        if not token:
            return self.state.append_chat(ChatRole.ASSISTANT, SIGN_IN_ADVISORY)

        self.state.append_chat(ChatRole.USER, message)
        prompt = build_chat_prompt(message, self.state.extracted_text)
        reply = await self._complete(prompt, token)
        return self.state.append_chat(ChatRole.ASSISTANT, reply if reply is not None else AI_ERROR_MESSAGE)

    async def summarize(self, token: Optional[str], text: Optional[str] = None) -> str:
        """Write a summary of text (the extracted document text by default) to the summary panel."""
        text = self.state.extracted_text if text is None else text
        if not token:
            summary = SUMMARY_SIGN_IN_ADVISORY
        elif not text.strip():
            summary = NOTHING_TO_SUMMARIZE
        else:
            reply = await self._complete(build_summary_prompt(text), token)
            summary = reply if reply is not None else AI_ERROR_MESSAGE
        self.state.set_summary(summary)
        return summary

    async def _complete(self, prompt: str, token: str) -> Optional[str]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint_url,
                    json={"prompt": prompt, "temperature": self.temperature},
                    headers={"Authorization": f"Bearer {token}"},
                )
            if not response.is_success:
                logging.error(f"Chat endpoint returned {response.status_code}: {response.text[:200]}")
                return None
            reply = extract_reply(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logging.error(f"Chat endpoint request failed: {e}")
            return None
        if reply is None:
            logging.error("Chat endpoint response carried no text field")
        return reply
