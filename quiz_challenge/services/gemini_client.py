import json
import asyncio
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional
import aiohttp
from ..config import settings
from ..errors import ProviderCallError

logger = logging.getLogger("quiz_challenge")

@dataclass(frozen=True)
class HttpReply:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def decoded(self) -> Any:
        """JSON body if it parses, otherwise the raw text."""
        try:
            return json.loads(self.body)
        except (ValueError, RecursionError):
            return self.body


def error_message_from(reply: HttpReply, default: str) -> str:
    try:
        data = json.loads(reply.body)
    except (ValueError, RecursionError):
        return reply.body or default
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return json.dumps(data, ensure_ascii=False)


def raise_for_status(reply: HttpReply, default: str) -> None:
    if reply.ok:
        return
    raise ProviderCallError(error_message_from(reply, default), status=reply.status)


def model_resource(model_id: str) -> str:
    return model_id if model_id.startswith("models/") else f"models/{model_id}"


class GeminiHttpTransport:
    """Thin async wrapper around the Generative Language REST API.

    Owns one aiohttp session, created on first use. Returns status and body
    untouched; callers decide what a failure means.
    """

    def __init__(self, base_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.base_url = (base_url or settings.gemini_api_base).rstrip("/")
        self.timeout_s = timeout_s if timeout_s is not None else settings.request_timeout_s
        self._session: Optional[aiohttp.ClientSession] = None

    def _headers(self, credential: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": credential,
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def send(self, method: str, path: str, *, credential: str, json_body: Optional[Dict[str, Any]] = None) -> HttpReply:
        url = f"{self.base_url}/{path.lstrip('/')}"
        session = self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        t0 = perf_counter()
        status = None
        try:
            async with session.request(method, url, headers=self._headers(credential), json=json_body, timeout=timeout) as resp:
                status = resp.status
                body = await resp.text()
        except aiohttp.ClientError as e:
            raise ProviderCallError(f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderCallError(f"Request timed out after {self.timeout_s}s: {path}") from e
        except UnicodeDecodeError as e:
            raise ProviderCallError(f"Could not decode the response body: {e}", status=status) from e
        logger.debug({
            "event": "gemini_http",
            "method": method,
            "path": path,
            "status": status,
            "latency_ms": int((perf_counter() - t0) * 1000),
        })
        return HttpReply(status=status, body=body)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
