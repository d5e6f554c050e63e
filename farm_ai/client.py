"""Minimal aiohttp client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from aiohttp import ClientError, ClientSession
from yarl import URL

from farm_engine.exceptions import ProviderError, QuotaExceededError

from .config import FarmAIConfig

_LOGGER = logging.getLogger(__name__)

__all__ = ["GeminiClient", "image_part", "is_quota_error", "text_part"]

QUOTA_STATUS = 429
QUOTA_MARKER = "RESOURCE_EXHAUSTED"

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def image_part(image: bytes, mime_type: str = "image/jpeg") -> dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": base64.b64encode(image).decode("ascii")}}


def is_quota_error(status: int | None, payload: Any) -> bool:
    """Return ``True`` if an error response signals rate limiting."""

    if status == QUOTA_STATUS:
        return True
    if isinstance(payload, Mapping):
        error = payload.get("error")
        if isinstance(error, Mapping):
            if error.get("code") == QUOTA_STATUS or error.get("status") == QUOTA_MARKER:
                return True
            return QUOTA_MARKER in str(error.get("message", ""))
    return QUOTA_MARKER in str(payload or "")


def _error_message(status: int, payload: Any) -> str:
    if isinstance(payload, Mapping):
        error = payload.get("error")
        if isinstance(error, Mapping) and error.get("message"):
            return f"HTTP {status}: {error['message']}"
    return f"HTTP {status}"


def _extract_json(payload: Any) -> Any:
    """Return the JSON document carried in the first candidate's text parts."""

    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as err:
        raise ProviderError("response carried no candidates") from err
    text = "".join(str(part.get("text", "")) for part in parts if isinstance(part, Mapping)).strip()
    if not text:
        raise ProviderError("empty response text")
    text = _FENCE_RE.sub("", text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        raise ProviderError(f"response was not JSON: {text[:200]}") from err


class GeminiClient:
    """Send prompts to Gemini and return the parsed JSON answer.

    Rate limiting is reported as :class:`QuotaExceededError`; every other
    failure (HTTP, network, timeout, unparseable answer) as
    :class:`ProviderError`. The client never retries.
    """

    def __init__(self, config: FarmAIConfig, session: ClientSession | None = None) -> None:
        if not config.api_key:
            raise ValueError("API key required to reach the Gemini API")
        self._config = config
        self._session = session
        self._owns_session = session is None

    @property
    def model(self) -> str:
        return self._config.model

    def _url(self) -> str:
        url = URL(f"{self._config.base_url}/models/{self._config.model}:generateContent")
        return str(url.with_query(key=self._config.api_key))

    def _get_session(self) -> ClientSession:
        if self._session is None:
            self._session = ClientSession()
        return self._session

    async def async_close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def async_generate_json(
        self,
        parts: Sequence[Mapping[str, Any]],
        *,
        response_schema: Mapping[str, Any] | None = None,
        use_search: bool = False,
    ) -> Any:
        """Run one ``generateContent`` call and decode its JSON answer."""

        generation_config: dict[str, Any] = {"responseMimeType": "application/json"}
        if response_schema is not None:
            generation_config["responseSchema"] = dict(response_schema)
        body: dict[str, Any] = {
            "contents": [{"parts": [dict(part) for part in parts]}],
            "generationConfig": generation_config,
        }
        if use_search:
            body["tools"] = [{"google_search": {}}]

        session = self._get_session()
        try:
            async with asyncio.timeout(self._config.timeout):
                async with session.post(
                    self._url(),
                    headers={"Content-Type": "application/json"},
                    json=body,
                ) as resp:
                    status = resp.status
                    try:
                        payload = await resp.json(content_type=None)
                    except ValueError as err:
                        # a non-JSON error body is classified by status alone
                        if status < 400:
                            raise ProviderError(f"unreadable response body: {err}") from err
                        payload = None
        except TimeoutError as err:
            raise ProviderError(f"request timed out after {self._config.timeout}s") from err
        except ClientError as err:
            if is_quota_error(getattr(err, "status", None), str(err)):
                raise QuotaExceededError(str(err)) from err
            raise ProviderError(f"request failed: {err}") from err

        if status >= 400:
            message = _error_message(status, payload)
            if is_quota_error(status, payload):
                raise QuotaExceededError(message)
            raise ProviderError(message)

        _LOGGER.debug("Gemini %s answered with status %s", self._config.model, status)
        return _extract_json(payload)
