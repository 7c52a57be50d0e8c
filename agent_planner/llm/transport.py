from __future__ import annotations

import asyncio
from typing import Any

import httpx


class RetryingPoster:
    """POST-with-backoff shared by the HTTP chat adapters.

    Retries only timeouts, 429 and 5xx; any other 4xx raises ValueError.
    """

    def __init__(
        self,
        *,
        provider: str,
        timeout_s: float,
        max_retries: int,
        retry_backoff_s: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._provider = provider
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._retry_backoff_s = retry_backoff_s
        self._transport = transport

    async def post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout_s, transport=self._transport
                ) as client:
                    response = await client.post(url, json=payload, headers=headers)
            except httpx.TimeoutException:
                if attempt >= self._max_retries:
                    raise RuntimeError(f"{self._provider} request timed out")
                await self._sleep_backoff(attempt)
                attempt += 1
                continue
            except httpx.HTTPError as exc:
                raise RuntimeError(f"{self._provider} request failed: {exc}") from exc

            if response.status_code == 429 or response.status_code >= 500:
                if attempt >= self._max_retries:
                    raise RuntimeError(
                        f"{self._provider} request failed with status {response.status_code}"
                    )
                await self._sleep_backoff(attempt)
                attempt += 1
                continue

            if 400 <= response.status_code < 500:
                hint = "check api key and model name"
                if response.status_code == 404:
                    hint = "check model name or base url"
                raise ValueError(
                    f"{self._provider} error status={response.status_code} hint={hint}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise RuntimeError(f"{self._provider} response was not valid JSON") from exc

    async def _sleep_backoff(self, attempt: int) -> None:
        delay = self._retry_backoff_s * (2**attempt)
        if delay > 0:
            await asyncio.sleep(delay)
