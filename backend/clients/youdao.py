"""Youdao Open API Client

Signed form POSTs to the translation and text-to-speech endpoints.
Failures come back as `Err(AppError)`; this client never raises for
upstream problems.
"""
import hashlib
import time
from typing import Callable

import httpx

from core.errors import (
    AppError,
    Ok,
    Result,
    external_service_error,
    external_service_timeout,
    external_service_unavailable,
)
from core.logging import upstream_logger

log = upstream_logger()

TRANSLATE_URL = "https://openapi.youdao.com/api"
TTS_URL = "https://openapi.youdao.com/ttsapi"

SUCCESS_CODE = "0"


def sign_request(app_key: str, query: str, salt: str, app_secret: str) -> str:
    """md5(appKey + q + salt + appSecret) as lowercase hex."""
    return hashlib.md5(f"{app_key}{query}{salt}{app_secret}".encode("utf-8")).hexdigest()


class YoudaoClient:
    """Async client for the Youdao open API."""

    __slots__ = ("_app_key", "_app_secret", "_client", "_owns_client", "_timeout", "_clock")

    def __init__(
        self,
        app_key: str,
        app_secret: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.time,
    ):
        self._app_key = app_key
        self._app_secret = app_secret
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None
        self._timeout = timeout_seconds
        self._clock = clock

    def _salt(self) -> str:
        # Epoch milliseconds
        return str(int(self._clock() * 1000))

    async def translate(self, query: str) -> Result[dict, AppError]:
        """English to simplified Chinese lookup for `query`."""
        salt = self._salt()
        params = {
            "q": query,
            "from": "EN",
            "to": "zh-CHS",
            "sign": sign_request(self._app_key, query, salt, self._app_secret),
            "salt": salt,
            "appKey": self._app_key,
        }
        response = await self._post(TRANSLATE_URL, params, service="translation")
        if response.is_err():
            return response

        try:
            payload = response.unwrap().json()
        except ValueError as e:
            return external_service_unavailable(
                "translation", f"invalid JSON response: {e}", origin="youdao.translate", cause=e
            )

        upstream_code = payload.get("errorCode") if isinstance(payload, dict) else None
        if upstream_code != SUCCESS_CODE:
            log.info("translation_rejected", query=query, upstream_code=upstream_code)
            return external_service_error("translation", str(upstream_code), origin="youdao.translate")
        return Ok(payload)

    async def synthesize(self, query: str) -> Result[bytes, AppError]:
        """MP3 speech for `query`."""
        salt = self._salt()
        params = {
            "q": query,
            "langType": "en",
            "appKey": self._app_key,
            "salt": salt,
            "sign": sign_request(self._app_key, query, salt, self._app_secret),
            "voice": "5",
        }
        response = await self._post(TTS_URL, params, service="TTS")
        if response.is_err():
            return response

        reply = response.unwrap()
        # Errors arrive as a JSON body instead of audio
        if reply.headers.get("content-type", "").startswith("application/json"):
            try:
                upstream_code = str(reply.json().get("errorCode"))
            except ValueError:
                upstream_code = "unknown"
            return external_service_error("TTS", upstream_code, origin="youdao.synthesize")
        return Ok(reply.content)

    async def _post(self, url: str, params: dict, *, service: str) -> Result[httpx.Response, AppError]:
        origin = f"youdao.{service.lower()}"
        try:
            response = await self._client.post(url, data=params)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            log.warning("upstream_timeout", service=service, url=url)
            return external_service_timeout(service, self._timeout, origin=origin, cause=e)
        except httpx.HTTPError as e:
            log.warning("upstream_failed", service=service, url=url, error=str(e))
            return external_service_unavailable(service, str(e), origin=origin, cause=e)
        log.debug("upstream_ok", service=service, status=response.status_code, params=params)
        return Ok(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
