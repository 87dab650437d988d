"""
Column defaults shared by the models.
"""

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Opaque 32-character lowercase hex identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
