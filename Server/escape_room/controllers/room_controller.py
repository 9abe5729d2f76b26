"""
Room Controller

Handles all room and participant HTTP endpoints.
"""

from flask import Blueprint, request
from ..utils.decorators import room_endpoint
from ..websocket.handlers import broadcast_room_update

room_bp = Blueprint('room', __name__)


def _json_body():
    return request.get_json(silent=True) or {}


@room_bp.route('/rooms', methods=['POST'])
@room_endpoint('create_room')
def create_room(room_service=None):
    """Create a waiting room and return its code and secret to the host."""
    data = _json_body()
    room = room_service.create_room(
        data.get('team_number'),
        data.get('num_students'),
        target_value=data.get('target_value'),
        mode=data.get('mode', 'char'),
    )

    return {
        'room_code': room.room_code,
        'room_id': room.id,
        'mode': room.mode,
        'expected_count': room.expected_count,
        'target_value': room.target_value,
    }, 201


@room_bp.route('/rooms/<room_code>', methods=['GET'])
@room_endpoint('get_room_state')
def get_room_state(room_code, room_service=None):
    """Get the current room state for polling clients."""
    return {'room': room_service.get_room_state(room_code)}


@room_bp.route('/rooms/<room_code>/start', methods=['POST'])
@room_endpoint('start_room')
def start_room(room_code, room_service=None):
    """Start a waiting room."""
    state = room_service.start_room(room_code)
    broadcast_room_update(room_code)
    return {'room': state}


@room_bp.route('/rooms/<room_code>/join', methods=['POST'])
@room_endpoint('join_room')
def join_room(room_code, room_service=None):
    """Join a room, claiming the next free position."""
    data = _json_body()
    participant = room_service.join_room(room_code, data.get('display_name'))
    view = room_service.get_participant(participant.id)

    broadcast_room_update(room_code)

    return {
        'participant_id': participant.id,
        'position': participant.position,
        'questions': view['questions'],
        'participant': view,
        'message': 'Successfully joined the game',
    }, 201


@room_bp.route('/participants/<participant_id>', methods=['GET'])
@room_endpoint('get_participant')
def get_participant(participant_id, room_service=None):
    """Get a participant's progress and question set."""
    return {'participant': room_service.get_participant(participant_id)}


@room_bp.route('/participants/<participant_id>/questions', methods=['GET'])
@room_endpoint('get_questions')
def get_questions(participant_id, room_service=None):
    """Get the stored question set for a participant."""
    view = room_service.get_participant(participant_id)
    return {'questions': view['questions']}


@room_bp.route('/participants/<participant_id>/submit', methods=['POST'])
@room_endpoint('submit_answers')
def submit_answers(participant_id, room_service=None):
    """Submit one group's answers (or the whole set in bit rooms)."""
    data = _json_body()
    result = room_service.submit_answers(participant_id, data.get('answers'), data.get('group'))

    if not result['already_completed']:
        broadcast_room_update(result['room_code'])

    return result
