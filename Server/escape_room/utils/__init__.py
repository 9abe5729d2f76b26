"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import room_endpoint, websocket_room_required
from .helpers import get_user_identity, utc_now
from .room_logger import room_logger

__all__ = ['room_endpoint', 'websocket_room_required', 'get_user_identity', 'utc_now', 'room_logger']
