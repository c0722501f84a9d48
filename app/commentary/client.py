"""
Gemini text-generation client used for ball commentary and match summaries.
"""
from typing import Any, Dict, Optional

import requests

from app.config import settings


class CommentaryError(Exception):
    """Raised when the text-generation call fails or is misconfigured."""
    pass


class GeminiClient:
    """Thin blocking wrapper over the Gemini generateContent REST endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.timeout = timeout or settings.COMMENTARY_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        """Return the generated text (possibly empty). Raises CommentaryError."""
        if not self.enabled:
            raise CommentaryError("GEMINI_API_KEY is not configured")

        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if max_output_tokens:
            payload["generationConfig"] = {"maxOutputTokens": max_output_tokens}

        try:
            resp = self.session.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CommentaryError(f"Network error: {e}") from e

        if resp.status_code != 200:
            raise CommentaryError(f"HTTP {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise CommentaryError(f"Invalid JSON response: {e}") from e

        return extract_text(data)


def extract_text(data: Any) -> str:
    """Join the text parts of the first candidate. Raises CommentaryError on an unexpected shape."""
    if not isinstance(data, dict):
        raise CommentaryError(f"Unexpected response body: {type(data).__name__}")
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise CommentaryError("Unexpected candidates in response")
    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        raise CommentaryError("Unexpected content in response")
    parts = content.get("parts") or []
    if not isinstance(parts, list) or not all(isinstance(p, dict) for p in parts):
        raise CommentaryError("Unexpected parts in response")
    return "".join(str(p.get("text", "")) for p in parts).strip()
