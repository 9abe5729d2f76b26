"""
WebSocket Event Handlers

Lets hosts watch a room and receive its state after every join, start and
submission. Clients that only poll the HTTP API do not need any of this.
"""

from flask import current_app
from flask_socketio import emit, join_room, leave_room
from ..services.room_service import get_room_service
from ..utils.decorators import websocket_room_required
from ..utils.room_logger import room_logger


def _channel(room_code):
    return f"room_{room_code.upper()}"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('watch_room')
    @websocket_room_required
    def handle_watch_room(data, room_state=None):
        """Subscribe to updates for a room and get its current state."""
        join_room(_channel(room_state['room_code']))
        emit('room_state_update', room_state)
        room_logger.logger.info(f"Socket subscribed to room {room_state['room_code']}")

    @socketio.on('unwatch_room')
    @websocket_room_required
    def handle_unwatch_room(data, room_state=None):
        """Stop receiving updates for a room."""
        leave_room(_channel(room_state['room_code']))
        emit('room_unwatched', {'room_code': room_state['room_code']})


def broadcast_room_update(room_code):
    """Push the latest room state to everyone watching it."""
    socketio = getattr(current_app, 'socketio', None)
    room_service = get_room_service()
    if not socketio or not room_service:
        return

    room_state = room_service.get_room_state(room_code)
    socketio.emit('room_state_update', room_state, to=_channel(room_code))
