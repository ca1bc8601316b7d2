"""
Integration tests for rate-limited document submission.

A simulated registry stands in for the HTTPS endpoint; the gate, codec and
client run unmodified.
"""

import asyncio
import json
import pytest
import httpx
from unittest.mock import MagicMock, patch

from shared.config import ClientConfig
from shared.errors import InvalidConfigurationError, SubmissionRejectedError
from service_commissioning.app.adapters import SubmissionClient
from service_commissioning.app.domain import codec
from service_commissioning.app.domain.models import Document
from service_commissioning.app.ratelimit import RateGate


class TestSubmissionFlow:
    """End-to-end submission scenarios."""

    @pytest.mark.asyncio
    async def test_second_submission_waits_for_drip(self, document, registry_reply, make_http_client):
        """Test that with one permit the second request starts only after a drip interval."""
        loop = asyncio.get_running_loop()
        request_starts = []

        async def handler(request):
            request_starts.append(loop.time())
            number = len(request_starts)
            if number == 1:
                # slow first exchange, so the second caller is admitted by the drip
                await asyncio.sleep(0.5)
            return registry_reply({"value": f"doc-{number}"})

        gate = RateGate(0.2, 1)
        client = SubmissionClient(
            ClientConfig(token="t", time_unit_seconds=0.2, request_limit=1),
            gate=gate,
            http_client=make_http_client(handler)
        )

        started = loop.time()
        try:
            results = await asyncio.gather(
                client.submit(document, "sig-1"),
                client.submit(document, "sig-2"),
            )
        finally:
            await gate.stop()

        assert sorted(results) == ["doc-1", "doc-2"]
        assert len(request_starts) == 2
        assert request_starts[0] - started < 0.1
        assert request_starts[1] - started >= gate.interval - 0.01
        assert request_starts[1] - started < 0.45

    @pytest.mark.asyncio
    async def test_successful_submission(self, document, registry_reply, make_http_client):
        """Test that a value reply returns the created id and releases once."""
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return registry_reply({"value": "abc-123"})

        gate = RateGate(1.0, 5)
        gate.release = MagicMock(wraps=gate.release)
        client = SubmissionClient(ClientConfig(token="t"), gate=gate, http_client=make_http_client(handler))

        try:
            result = await client.submit(document, "sig")
        finally:
            await gate.stop()

        assert result == "abc-123"
        gate.release.assert_called_once()
        assert codec.decode_model(captured["body"]["product_document"], Document).doc_id == "doc-0001"

    @pytest.mark.asyncio
    async def test_rejected_submission(self, document, registry_reply, make_http_client):
        """Test that an error reply raises SubmissionRejectedError and releases once."""
        gate = RateGate(1.0, 5)
        gate.release = MagicMock(wraps=gate.release)
        client = SubmissionClient(
            ClientConfig(token="t"),
            gate=gate,
            http_client=make_http_client(lambda request: registry_reply({"error_message": "invalid inn"}))
        )

        try:
            with pytest.raises(SubmissionRejectedError) as exc_info:
                await client.submit(document, "sig")
        finally:
            await gate.stop()

        assert exc_info.value.reason == "invalid inn"
        gate.release.assert_called_once()

    def test_zero_limit_fails_before_timer(self):
        """Test that request_limit=0 is refused before any drip task exists."""
        with patch("asyncio.get_running_loop") as mock_loop:
            with pytest.raises(InvalidConfigurationError):
                RateGate(1.0, 0)
            with pytest.raises(InvalidConfigurationError):
                SubmissionClient(ClientConfig(token="t", request_limit=0))

        mock_loop.assert_not_called()

    @pytest.mark.asyncio
    async def test_burst_is_spread_across_window(self, document, registry_reply, make_http_client):
        """Test that a burst beyond the quota is admitted at the drip pace."""
        loop = asyncio.get_running_loop()
        request_starts = []

        async def handler(request):
            request_starts.append(loop.time())
            # keep each exchange in flight past the window so only the drip admits
            await asyncio.sleep(1.0)
            return registry_reply({"value": "ok"})

        gate = RateGate(0.5, 5)
        client = SubmissionClient(
            ClientConfig(token="t", time_unit_seconds=0.5, request_limit=5),
            gate=gate,
            http_client=make_http_client(handler)
        )

        started = loop.time()
        try:
            results = await asyncio.gather(*(client.submit(document, f"sig-{i}") for i in range(8)))
        finally:
            await gate.stop()

        assert results == ["ok"] * 8
        offsets = sorted(start - started for start in request_starts)
        assert all(offset < 0.05 for offset in offsets[:5])
        # remaining three follow the 0.1s drip
        for index, offset in enumerate(offsets[5:], start=1):
            assert offset >= index * gate.interval - 0.02
