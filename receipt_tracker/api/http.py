"""Network transport backed by httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..auth.tokens import AnonymousTokenProvider, TokenProvider
from .errors import ApiError
from .requests import ApiRequest
from .transport import Transport

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """Sends requests to the backend with the caller's bearer token."""

    live = True

    def __init__(
        self,
        base_url: str,
        tokens: TokenProvider | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tokens = tokens or AnonymousTokenProvider()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _headers(self, request: ApiRequest) -> dict[str, str]:
        headers: dict[str, str] = {}
        # Multipart bodies get their own Content-Type (with boundary) from httpx
        if request.upload is None:
            headers["Content-Type"] = "application/json"
        id_token = await self._tokens.get_id_token()
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"
        return headers

    async def send(self, request: ApiRequest) -> Any:
        headers = await self._headers(request)
        kwargs: dict[str, Any] = {"params": request.query, "headers": headers}

        if request.upload is not None:
            kwargs["files"] = {
                "file": (
                    request.upload.filename,
                    request.upload.content,
                    request.upload.content_type,
                )
            }
            kwargs["data"] = request.form
        elif request.json is not None:
            kwargs["json"] = request.json

        logger.debug("%s %s %s", request.method, request.path, request.query)
        response = await self._client.request(request.method, request.path, **kwargs)

        if not response.is_success:
            logger.info(
                "%s %s failed with status %d",
                request.method,
                request.path,
                response.status_code,
            )
            raise ApiError(response.status_code, _error_message(response))

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.info("%s %s returned a non-JSON body", request.method, request.path)
            raise ApiError(response.status_code, "invalid JSON response")


def _error_message(response: httpx.Response) -> str:
    fallback = f"API Error: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback
