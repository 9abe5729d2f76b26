"""
Endpoint Decorators

Contains decorators shared by the HTTP controllers and WebSocket handlers.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit

from ..errors import EscapeRoomError
from .room_logger import room_logger


def room_endpoint(action):
    """
    Decorator for JSON endpoints backed by the room service.

    Injects the service as the room_service keyword argument, logs the
    action and the response, and turns service errors into JSON error
    responses. The wrapped view returns a dict, or a (dict, status) tuple.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            from ..services.room_service import get_room_service

            room_code = kwargs.get('room_code')
            room_service = get_room_service()
            if not room_service:
                return jsonify({
                    'success': False,
                    'error': 'Room service unavailable'
                }), 500

            details = {key: value for key, value in kwargs.items() if key != 'room_code'}
            room_logger.log_user_action(request, action, room_code, **details)

            try:
                result = f(*args, room_service=room_service, **kwargs)
                response_data, status = result if isinstance(result, tuple) else (result, 200)
                response_data = {'success': True, **response_data}
                room_logger.log_server_response(request, action, True, response_data, room_code)
                return jsonify(response_data), status

            except EscapeRoomError as e:
                error_response = {
                    'success': False,
                    'error': e.message
                }
                room_logger.log_server_response(request, action, False, error_response, room_code)
                return jsonify(error_response), e.status_code

            except Exception as e:
                room_logger.log_error(request, e, action, room_code)
                error_response = {
                    'success': False,
                    'error': f'Failed to {action.replace("_", " ")}'
                }
                room_logger.log_server_response(request, action, False, error_response, room_code)
                return jsonify(error_response), 500

        return decorated_function
    return decorator


def websocket_room_required(f):
    """Decorator for WebSocket events that address a room by code."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.room_service import get_room_service

        room_service = get_room_service()
        if not room_service or not args or not isinstance(args[0], dict) or not args[0].get('room_code'):
            emit('error', {'error': 'Room code is required'})
            return

        try:
            room_state = room_service.get_room_state(args[0]['room_code'])
        except EscapeRoomError as e:
            emit('error', {'error': e.message})
            return

        kwargs['room_state'] = room_state
        return f(*args, **kwargs)

    return decorated_function
