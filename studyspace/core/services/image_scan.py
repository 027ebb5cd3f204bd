# studyspace/core/services/image_scan.py
import json
import logging
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from studyspace.models.schemas import ScanResult

SCAN_INSTRUCTION = """
You are an assistant that analyses images of study and programming material.
Task: extract the text from the image and classify it into 2 parts:
1. "problem": content that is an exercise statement, a question, a problem to solve, a code error...
2. "prompts": content that is a sample instruction, guidance for an AI, or a prompt template.

Output requirements:
Return a single JSON object only (no markdown, no preamble) with this structure:
{
    "has_problem": boolean,
    "problem_content": "the extracted exercise statement...",
    "has_prompts": boolean,
    "detected_prompts": ["prompt 1", "prompt 2"]
}
If the content cannot be told apart, put all of it into "problem_content".
"""
REFINE_INSTRUCTION = "You are a prompt expert. Rewrite the following text into a complete, polished prompt for an AI:\n"


class ScanAction(str, Enum):
    SCAN = "scan"
    REFINE = "refine"


class MissingApiKeyError(Exception):
    pass


class UpstreamError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def build_payload(action: ScanAction, image_base64: str, mime_type: str, current_text: str = "") -> Dict[str, Any]:
    if ScanAction(action) == ScanAction.REFINE:
        # Refining rewrites text only, the image is not sent.
        return {"contents": [{"parts": [{"text": REFINE_INSTRUCTION + (current_text or "")}]}]}
    return {
        "contents": [{
            "parts": [
                {"text": SCAN_INSTRUCTION},
                {"inline_data": {"mime_type": mime_type, "data": image_base64}},
            ]
        }],
        "generationConfig": {"response_mime_type": "application/json"},
    }


def response_text(data: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate of a generateContent response."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_scan_result(data: Dict[str, Any]) -> ScanResult:
    """Turn a scan-mode model response into a ScanResult.

    Output that is not the expected JSON object, or that classifies nothing,
    falls back to treating the whole text as the problem statement.
    """
    text = response_text(data)
    if not text.strip():
        return ScanResult()
    try:
        parsed = json.loads(_strip_code_fence(text))
    except ValueError:
        parsed = None
    if not isinstance(parsed, dict):
        return ScanResult(has_problem=True, problem_content=text.strip())

    prompts = [str(p) for p in parsed.get("detected_prompts") or [] if str(p).strip()]
    has_prompts = bool(parsed.get("has_prompts")) and bool(prompts)
    problem_content = str(parsed.get("problem_content") or "")
    has_problem = bool(parsed.get("has_problem")) and bool(problem_content.strip())
    if not has_problem and not has_prompts:
        return ScanResult(has_problem=True, problem_content=problem_content.strip() or text.strip())
    return ScanResult(
        has_problem=has_problem,
        problem_content=problem_content if has_problem else "",
        has_prompts=has_prompts,
        detected_prompts=prompts if has_prompts else [],
    )


class ImageScanService:
    """Stateless relay from the image-scan endpoint to the Gemini generateContent API."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, action: ScanAction, image_base64: str, mime_type: str, current_text: str = "") -> Dict[str, Any]:
        """Forward one request upstream and return the raw response JSON."""
        if not self.api_key:
            raise MissingApiKeyError("API key not configured.")
        payload = build_payload(action, image_base64, mime_type, current_text)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.url, params={"key": self.api_key}, json=payload)
        data = response.json()
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logging.error(f"Gemini API Error ({response.status_code}): {message}")
            raise UpstreamError(response.status_code, message)
        if not response.is_success:
            raise UpstreamError(response.status_code, response.reason_phrase or "Upstream request failed")
        return data

    async def classify(self, image_base64: str, mime_type: str) -> ScanResult:
        data = await self.generate(ScanAction.SCAN, image_base64, mime_type)
        return parse_scan_result(data)
