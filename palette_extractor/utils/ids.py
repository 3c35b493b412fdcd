"""
Palette Extractor Request ID Utilities
Generate unique request IDs for tracing.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "pal") -> str:
    """
    Generate a unique request ID for tracking.
    
    Args:
        prefix: Short tag identifying the request type
        
    Returns:
        Unique request ID string of the form ``<prefix>-<timestamp>-<uuid8>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"

