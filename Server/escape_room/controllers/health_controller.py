"""
Health Controller

Service health and log statistics.
"""

from flask import Blueprint, current_app, request, jsonify
from ..services.room_service import get_room_service
from ..utils.room_logger import room_logger

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        room_service = get_room_service()

        room_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'room_service_available': room_service is not None,
            'realtime_updates': getattr(current_app, 'socketio', None) is not None,
            'log_stats': room_logger.get_log_stats()
        }

        room_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        room_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        room_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
