"""Serve command implementation.

Speaks the request/response protocol over stdio: one JSON request per
input line, one JSON response per output line, in order. Logging goes
to stderr so stdout carries responses only.
"""

import json
import logging
import sys

from pkgbridge.cli.types import build_bridge
from pkgbridge.core.errors import InvalidRequestError

logger = logging.getLogger(__name__)


def serve() -> None:
    """Answer JSON requests read from stdin until end of input.

    Example request:
        {"id": 1, "operation": "search", "query": "htop"}
    """
    bridge = build_bridge()
    logger.info("Serving requests on stdin")

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue

        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            response = {
                "success": False,
                "error": f"Malformed request: {e}",
                "error_type": InvalidRequestError.error_type,
            }
        else:
            response = bridge.handle_message(message)

        sys.stdout.write(json.dumps(response) + "\n")
        sys.stdout.flush()
