"""
Submit one commissioning document to the registry from the command line.

The document is read from a JSON file in the registry's wire format and the
signature from a file holding the raw signature bytes. Settings not given
on the command line come from CRPT_* environment variables or a .env file.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Union

import httpx
from prometheus_client import REGISTRY
from pydantic import ValidationError

from shared.config import ClientConfig, get_config
from shared.errors import EncodingError, RegistryClientException
from shared.logging import configure_logging
from shared.metrics import SubmissionMetrics

from .adapters import SubmissionClient
from .domain.models import Document

_process_metrics: Optional[SubmissionMetrics] = None


def load_document(path: Path, doc_type_hint: Optional[str] = None) -> Document:
    """Load a document from wire JSON, optionally overriding its type hint."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if doc_type_hint is not None:
            data["doc_type"] = doc_type_hint
        return Document.model_validate(data)
    except (ValueError, TypeError) as e:
        raise EncodingError(
            f"Cannot read document from {path}",
            details={"path": str(path), "error": str(e)}
        ) from e


async def submit(
    *,
    config: ClientConfig,
    document: Document,
    signature: Union[bytes, str],
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Submit a single document and return the registry's id for it."""
    async with SubmissionClient(config, http_client=http_client, metrics=_metrics_for(config)) as client:
        return await client.submit(document, signature)


def _metrics_for(config: ClientConfig) -> Optional[SubmissionMetrics]:
    """Process-wide metrics in the default registry, when enabled."""
    global _process_metrics
    if not config.enable_metrics:
        return None
    if _process_metrics is None:
        _process_metrics = SubmissionMetrics(REGISTRY)
    return _process_metrics


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit a commissioning document to the registry.")
    parser.add_argument("document", type=Path, help="Path to the document JSON")
    parser.add_argument("signature", type=Path, help="Path to the signature file")
    parser.add_argument("--doc-type", default=None, help="Document type hint, e.g. csv or xml")
    parser.add_argument("--token", default=None, help="Registry bearer token")
    parser.add_argument("--api-url", default=None, help="Registry submission endpoint")
    parser.add_argument("--request-limit", type=int, default=None, help="Requests allowed per time unit")
    parser.add_argument("--time-unit", type=float, default=None, help="Rate window in seconds")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--log-level", default=None, help="Log level")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    overrides = {
        "token": args.token,
        "api_url": args.api_url,
        "request_limit": args.request_limit,
        "time_unit_seconds": args.time_unit,
        "request_timeout": args.timeout,
        "log_level": args.log_level,
    }
    try:
        config = get_config(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 2
    configure_logging("commissioning", config.log_level)

    try:
        signature = args.signature.read_bytes()
        document = load_document(args.document, args.doc_type)
        document_id = asyncio.run(submit(config=config, document=document, signature=signature))
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except RegistryClientException as e:
        print(e.to_response().model_dump_json(), file=sys.stderr)
        return 1

    print(document_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
