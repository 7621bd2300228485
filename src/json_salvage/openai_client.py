from __future__ import annotations

import logging
from typing import Any

import httpx

from json_salvage.config import ClientConfig
from json_salvage.extraction.envelope import envelope_text
from json_salvage.extraction.extractor import JSONExtractError, require_json
from json_salvage.utils.retry import TransportRetryConfig, reprompt_retrying, transport_retry

logger = logging.getLogger(__name__)


class ChatCompletionsClient:
    """
    Minimal HTTP client for an OpenAI-compatible Chat Completions API.

    Returns the raw response envelope; pulling the JSON payload out of it is
    left to extract_json / require_json.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_s: int = 90,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_s),
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @classmethod
    def from_config(cls, cfg: ClientConfig, transport: httpx.AsyncBaseTransport | None = None) -> "ChatCompletionsClient":
        return cls(api_key=cfg.api_key, base_url=cfg.base_url, timeout_s=cfg.timeout_seconds, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    @transport_retry(TransportRetryConfig())
    async def create_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float | None = None,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if extra:
            payload.update(extra)

        resp = await self._client.post("/chat/completions", json=payload)
        resp.raise_for_status()
        return resp.json()


async def request_json(
    client: ChatCompletionsClient,
    *,
    messages: list[dict[str, Any]],
    model: str,
    expect_array: bool = False,
    attempts: int = 3,
    temperature: float | None = None,
) -> Any:
    """
    Ask the model and return the JSON object (or array) in its reply.

    A reply without usable JSON is retryable: the same request is sent again
    until `attempts` is exhausted, then JSONExtractError is raised.
    """
    async for attempt in reprompt_retrying(attempts):
        with attempt:
            envelope = await client.create_completion(model=model, messages=messages, temperature=temperature)
            try:
                # extract_json only unwraps envelopes in object mode.
                return require_json(envelope_text(envelope) or "", expect_array)
            except JSONExtractError:
                logger.info(
                    "json_extract miss attempt=%s/%s model=%s",
                    attempt.retry_state.attempt_number,
                    attempts,
                    model,
                )
                raise
    raise JSONExtractError("No attempts made")
