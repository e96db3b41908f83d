"""
Test-harness entry point.

Usage:
    vibescore-income-eval [--indent N] [--metrics-file PATH] <base64url JSON payload>

The payload is {"data": {...}, "options": {...}}. The JSON ScoreResult is
written to stdout; structured logs go to stderr.
"""

import argparse
import base64
import binascii
import json
import sys
import time
import uuid
from typing import Any, List, Optional

from vibescore_income.cli.schemas import ScorePayload
from vibescore_income.config import settings
from vibescore_income.domain.exceptions import InvalidPayloadError
from vibescore_income.domain.scoring import compute_income_score
from vibescore_income.infrastructure.observability.logging import log_score, setup_logging
from vibescore_income.infrastructure.observability.metrics import export_metrics, record_payload_failure, record_score


def decode_payload(encoded: str) -> ScorePayload:
    """
    Decode a base64url JSON payload.

    Raises InvalidPayloadError only when the text is not base64url JSON. A
    decoded document that is not an object is scored as an empty profile.
    """
    text = (encoded or "").strip()
    padded = text + "=" * (-len(text) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        document: Any = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidPayloadError(f"Payload is not base64url-encoded JSON: {e}") from e

    if not isinstance(document, dict):
        document = {}
    return ScorePayload.model_validate(document)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vibescore-income-eval",
        description="Score one income profile from a base64url-encoded JSON payload",
    )
    parser.add_argument("payload", help="base64url-encoded JSON {data, options}")
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print the result JSON")
    parser.add_argument("--metrics-file", default=None, help="Write Prometheus metrics to this textfile")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        payload = decode_payload(args.payload)
    except InvalidPayloadError as e:
        record_payload_failure()
        if args.metrics_file:
            export_metrics(args.metrics_file)
        print(f"error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level, stream=sys.stderr)

    started = time.perf_counter()
    result = compute_income_score(payload.data, payload.options)
    duration_ms = (time.perf_counter() - started) * 1000

    log_score(str(uuid.uuid4()), result, round(duration_ms, 3))
    record_score(result)
    if args.metrics_file:
        export_metrics(args.metrics_file)

    print(json.dumps(result.to_dict(), indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
