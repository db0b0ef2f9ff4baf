"""
Pricolor Request ID Utilities
Generate unique request IDs for tracing individual picks.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "pick") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Leading tag identifying the caller

    Returns:
        Unique request ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"

