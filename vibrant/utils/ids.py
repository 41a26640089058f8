"""
Vibrant Palette Request ID Utilities
Generate unique request IDs for tracing extraction calls.
"""
import re
import uuid
from datetime import datetime

_REQUEST_ID_RE = re.compile(r"^[a-z]+-(\d{14})-[0-9a-f]{8}$")


def generate_request_id(prefix: str = "vib") -> str:
    """
    Generate a unique request ID, e.g. ``vib-20240101120000-1a2b3c4d``.
    """
    return f"{prefix}-{datetime.now():%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}"


def extract_timestamp_from_request_id(request_id: str) -> str:
    """Return the 14-digit timestamp of a request ID, or empty if malformed."""
    match = _REQUEST_ID_RE.match(request_id)
    return match.group(1) if match else ""
