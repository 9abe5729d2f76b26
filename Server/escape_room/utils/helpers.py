"""
Helper Functions

Contains utility functions used throughout the application.
"""

import random
from datetime import datetime, timezone
from typing import Dict, Optional

from flask import request


def get_user_identity(request_obj=None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user_ip = request_obj.remote_addr or 'unknown'

    return {
        'user_ip': user_ip,
        'session_id': None,
        'username': None
    }


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def random_code(rng: random.Random, alphabet: str, length: int) -> str:
    return ''.join(rng.choice(alphabet) for _ in range(length))
