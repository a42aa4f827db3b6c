#!/usr/bin/env python3
"""
Sandbox entrypoint for content-scanner.
Reads a search or audit request from stdin JSON, runs it, outputs JSON to stdout.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from pydantic import ValidationError

from content_scanner.config import ScannerConfig
from content_scanner.models import AuditRequest, SearchRequest
from content_scanner.orchestrator import run_audit, run_search

logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger(__name__)

VALID_MODES = {"search", "audit"}


def main() -> None:
    try:
        input_data = json.load(sys.stdin)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON input: {e}"}))
        sys.exit(1)

    if not isinstance(input_data, dict):
        print(json.dumps({"error": "Invalid JSON input: expected an object"}))
        sys.exit(1)

    mode = input_data.pop("mode", "search")
    if mode not in VALID_MODES:
        print(
            json.dumps(
                {
                    "error": f"Invalid mode '{mode}'",
                    "valid_modes": sorted(VALID_MODES),
                }
            )
        )
        sys.exit(1)

    try:
        if mode == "search":
            request = SearchRequest(**input_data)
        else:
            request = AuditRequest(**input_data)
    except ValidationError as e:
        print(json.dumps({"error": f"Invalid {mode} request: {e}"}))
        sys.exit(1)

    config = ScannerConfig.from_env()

    try:
        if mode == "search":
            response = asyncio.run(run_search(request, config))
        else:
            response = asyncio.run(run_audit(request, config))
        print(json.dumps(response.model_dump()))
    except Exception as e:
        print(json.dumps({"error": str(e)}))
        sys.exit(1)


if __name__ == "__main__":
    main()
