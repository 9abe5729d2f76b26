"""
WebSocket Package

Real-time room update notifications.
"""

from .handlers import register_websocket_handlers, broadcast_room_update

__all__ = ['register_websocket_handlers', 'broadcast_room_update']
