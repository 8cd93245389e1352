"""RAG webhook client with protocol-based swappable implementations.

Production code uses ``WebhookRagClient``, which POSTs the request body with
``httpx`` and classifies whatever comes back.  Tests use ``InMemoryRagClient``,
which records calls and returns canned answers (or raises canned errors)
without touching the network.

Classification of a complete response body:

* undecodable, not JSON, or not a JSON object -> ``MalformedResponseError``
* ``code`` present and not 200  -> ``ApplicationError`` (message + hint)
* otherwise                      -> ``RagAnswer`` (invalid citations are
  ``MalformedResponseError``, never silently dropped)

The HTTP status line is not consulted; the body alone decides.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlsplit

import httpx
import structlog
from pydantic import ValidationError

from rag_chat.errors import (
    ApplicationError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)
from rag_chat.schemas.chat import RagAnswer

if TYPE_CHECKING:
    from rag_chat.errors import ClientError
    from rag_chat.services.request_builder import RequestParameters

logger = structlog.get_logger()

UNKNOWN_ERROR = "Unknown error"


class RagClient(Protocol):
    """Protocol for a single RAG webhook round trip."""

    async def query(
        self,
        endpoint: str,
        parameters: RequestParameters,
        timeout_ms: int,
        validate_certificates: bool,
    ) -> RagAnswer:
        """Send *parameters* to *endpoint* and return the normalized answer.

        Raises:
            ClientError: Transport, timeout, malformed-response, or
                application failure.
        """
        ...


def parse_response(body: str) -> RagAnswer:
    """Parse and classify a webhook response body.

    Raises:
        MalformedResponseError: If the body is not a JSON object or a source
            citation is invalid.
        ApplicationError: If the object carries a ``code`` other than 200.
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        msg = f"Failed to parse response: {exc}"
        raise MalformedResponseError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Failed to parse response: expected a JSON object, got {type(data).__name__}"
        raise MalformedResponseError(msg)

    code = data.get("code")
    if code is not None and code != 200:
        raise ApplicationError(
            message=data.get("message") or UNKNOWN_ERROR,
            hint=data.get("hint") or None,
            code=code if isinstance(code, int) else None,
        )

    try:
        return RagAnswer.model_validate(
            {
                "answer": data.get("answer"),
                "sources": data.get("sources"),
                "sources_count": data.get("sources_count"),
            }
        )
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()
        )
        msg = f"Failed to parse response: {details}"
        raise MalformedResponseError(msg) from exc


class WebhookRagClient:
    """Production client POSTing JSON to the configured webhook.

    A fresh ``httpx.AsyncClient`` is opened per call because certificate
    validation is a per-call option.  *transport* is injectable so tests can
    pass an ``httpx.MockTransport``.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def query(
        self,
        endpoint: str,
        parameters: RequestParameters,
        timeout_ms: int,
        validate_certificates: bool,
    ) -> RagAnswer:
        """POST the request body and classify the response."""
        timeout_s = timeout_ms / 1000
        host = urlsplit(endpoint).hostname
        started = time.monotonic()
        logger.info("rag_query_started", host=host, timeout_ms=timeout_ms)

        try:
            async with asyncio.timeout(timeout_s):
                body = await self._post(endpoint, parameters, timeout_s, validate_certificates)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("rag_query_failed", host=host, reason="timeout", timeout_ms=timeout_ms)
            raise RequestTimeoutError(timeout_ms) from exc
        except httpx.DecodingError as exc:
            logger.warning("rag_query_failed", host=host, reason="decoding", error=str(exc))
            msg = f"Failed to parse response: {exc}"
            raise MalformedResponseError(msg) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("rag_query_failed", host=host, reason="transport", error=str(exc))
            msg = f"Request failed: {exc}"
            raise TransportError(msg) from exc

        try:
            answer = parse_response(body)
        except (MalformedResponseError, ApplicationError) as exc:
            logger.warning(
                "rag_query_failed",
                host=host,
                reason=type(exc).__name__,
                elapsed_ms=_elapsed_ms(started),
            )
            raise

        logger.info(
            "rag_query_completed",
            host=host,
            sources=len(answer.sources),
            elapsed_ms=_elapsed_ms(started),
        )
        return answer

    async def _post(
        self,
        endpoint: str,
        parameters: RequestParameters,
        timeout_s: float,
        validate_certificates: bool,
    ) -> str:
        content = json.dumps(parameters.to_payload()).encode("utf-8")
        async with httpx.AsyncClient(
            verify=validate_certificates,
            timeout=httpx.Timeout(timeout_s),
            transport=self._transport,
        ) as client:
            resp = await client.post(
                endpoint,
                content=content,
                headers={"Content-Type": "application/json"},
            )
            return resp.text


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class InMemoryRagClient:
    """Test double that records calls and returns canned responses.

    Set ``error`` to make every call raise it.  Set ``gate`` to an
    ``asyncio.Event`` to hold calls in flight until the test releases it.
    """

    def __init__(self, answer: RagAnswer | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.answer: RagAnswer = answer or RagAnswer(answer="test answer")
        self.error: ClientError | None = None
        self.gate: asyncio.Event | None = None

    async def query(
        self,
        endpoint: str,
        parameters: RequestParameters,
        timeout_ms: int,
        validate_certificates: bool,
    ) -> RagAnswer:
        """Record the call, then return the canned answer or raise the canned error."""
        self.calls.append(
            {
                "endpoint": endpoint,
                "payload": parameters.to_payload(),
                "timeout_ms": timeout_ms,
                "validate_certificates": validate_certificates,
            }
        )
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.answer
