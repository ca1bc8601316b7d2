"""
Registry client for commissioning document submission.
"""

import asyncio
import time
from typing import Optional, Union

import httpx

from shared.config import ClientConfig, get_config
from shared.errors import (
    EncodingError,
    InvalidConfigurationError,
    OperationAbortedError,
    RegistryClientException,
    SubmissionRejectedError,
    TransportError,
)
from shared.logging import clear_context, get_logger, set_submission_context
from shared.metrics import SubmissionMetrics

from ..domain import codec
from ..domain.models import Document, DocumentFormat, ProductGroup, RequestBody, Response
from ..ratelimit import RateGate

_OUTCOMES = {
    OperationAbortedError: "aborted",
    TransportError: "transport_error",
    SubmissionRejectedError: "rejected",
    EncodingError: "encoding_error",
}


class SubmissionClient:
    """Submits commissioning documents under the gate's admission control.

    Each ``submit`` takes one permit, performs exactly one POST and gives the
    permit back on every exit path. Retrying is left to the caller.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        gate: Optional[RateGate] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[SubmissionMetrics] = None
    ):
        self.config = config or get_config()
        self.logger = get_logger("commissioning.registry_client")

        if not self.config.token:
            self.logger.error("Registry token is not configured")
            raise InvalidConfigurationError("Registry token must be configured")
        if self.config.request_timeout <= 0:
            self.logger.error("Request timeout must be positive", request_timeout=self.config.request_timeout)
            raise InvalidConfigurationError(
                "request_timeout must be positive",
                details={"request_timeout": self.config.request_timeout}
            )

        self.api_url = self.config.api_url
        self.metrics = metrics
        self._owns_gate = gate is None
        self.gate = gate or RateGate.from_config(self.config, metrics=metrics)
        self._http_client = http_client

    async def __aenter__(self) -> "SubmissionClient":
        if self._owns_gate:
            await self.gate.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Stop the gate if this client created it."""
        if self._owns_gate:
            await self.gate.stop()

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.token}",
        }

    def build_request_body(self, document: Document, signature: Union[bytes, str]) -> RequestBody:
        """Encode the document and signature into the submission envelope."""
        return RequestBody(
            document_format=DocumentFormat.MANUAL,
            product_document=codec.encode_payload(document),
            product_group=ProductGroup.MILK,
            signature=codec.encode_signature(signature),
            type=document.doc_type,
        )

    async def submit(self, document: Document, signature: Union[bytes, str]) -> str:
        """Submit one document and return the id the registry assigned to it."""
        started = time.monotonic()
        set_submission_context(doc_id=document.doc_id)
        outcome = "success"

        try:
            try:
                await self.gate.acquire()
            except asyncio.CancelledError as e:
                self.logger.warning("Submission aborted while waiting for admission")
                raise OperationAbortedError(
                    "Cancelled while waiting for admission",
                    details={"doc_id": document.doc_id}
                ) from e

            try:
                return await self._submit_admitted(document, signature)
            finally:
                self.gate.release()

        except RegistryClientException as e:
            outcome = _OUTCOMES.get(type(e), "error")
            raise
        except asyncio.CancelledError:
            outcome = "cancelled"
            self.logger.warning("Submission cancelled during registry exchange")
            raise
        except Exception:
            outcome = "error"
            self.logger.exception("Unexpected failure during submission")
            raise
        finally:
            if self.metrics:
                self.metrics.record_submission(outcome, time.monotonic() - started)
            clear_context()

    async def _submit_admitted(self, document: Document, signature: Union[bytes, str]) -> str:
        payload = codec.to_json_bytes(self.build_request_body(document, signature))

        try:
            response = await self._post(payload)
        except httpx.HTTPError as e:
            self.logger.error("Registry request failed", url=self.api_url, error=str(e))
            raise TransportError(
                f"Registry request failed: {e}",
                details={"url": self.api_url, "error_type": type(e).__name__, "error": str(e)}
            ) from e

        try:
            reply = Response.model_validate_json(response.content)
        except ValueError as e:
            self.logger.error(
                "Registry response could not be parsed",
                status_code=response.status_code,
                body=response.text[:500]
            )
            raise TransportError(
                "Registry returned an unreadable response",
                details={"status_code": response.status_code, "body": response.text[:500]}
            ) from e

        if reply.succeeded:
            self.logger.info("Document created", document_uuid=reply.value, status_code=response.status_code)
            return reply.value

        reason = reply.error_message or ""
        self.logger.error("Registry rejected document", status_code=response.status_code, reason=reason)
        raise SubmissionRejectedError(
            reason,
            details={"status_code": response.status_code, "error_message": reason}
        )

    async def _post(self, payload: bytes) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self.api_url,
                content=payload,
                headers=self._headers(),
                timeout=self.config.request_timeout
            )

        async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
            return await client.post(self.api_url, content=payload, headers=self._headers())
