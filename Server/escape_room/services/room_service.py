"""
Room Service

Coordinates room creation, joining, starting and answer submission on top of
the puzzle generator, the answer validator and an injected room repository.
"""

import random
from typing import Any, Dict, List, Optional

from flask import current_app

from ..config.game_settings import (
    MAX_STUDENTS, MIN_STUDENTS, ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, ROOM_MODES,
    TARGET_CHARACTERS, TARGET_WORDS
)
from ..errors import StateError, ValidationError
from ..models.puzzle import Question
from ..models.room import FLAT_GROUP, GroupProgress, Participant, Room, RoomStatus
from ..utils.helpers import isoformat, random_code, utc_now
from ..utils.room_logger import room_logger
from .answer_validator import (
    evaluate_completion, group_names, progress_key, revealed_bits, validate_answers
)
from .puzzle_generator import character_to_bits, generate_questions
from .room_repository import RoomRepository

MAX_SUBMIT_ATTEMPTS = 5


def _integer(value, field_name: str) -> int:
    """Accept an int or a string of digits; floats and bools are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith('-') else text
        if digits.isdecimal():
            return int(text)
    raise ValidationError(f"{field_name} must be an integer")


class RoomService:
    """
    Escape room game logic.

    This class handles:
    - Room creation with a host-supplied or random target value
    - Atomic position claims and per-participant question generation
    - All-or-nothing group submissions with a final reconstruction check
    - Public views that never leak unrevealed bits
    """

    def __init__(self, repository: RoomRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng or random.Random()

    # Rooms

    def _random_target(self, mode: str, length: int) -> str:
        if mode == 'bit':
            return ''.join(self.rng.choice('01') for _ in range(length))
        words = TARGET_WORDS.get(length)
        if words:
            return self.rng.choice(words)
        return random_code(self.rng, 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', length)

    def _check_target(self, target_value, mode: str, length: int) -> str:
        if not isinstance(target_value, str):
            raise ValidationError("Target value must be a string")
        if len(target_value) != length:
            raise ValidationError(f"Target value must have exactly {length} characters, one per student")
        if mode == 'bit' and set(target_value) - {'0', '1'}:
            raise ValidationError("Bit rooms need a target made of 0 and 1")
        if mode == 'char' and any(char not in TARGET_CHARACTERS for char in target_value):
            raise ValidationError("Target value must be printable ASCII")
        return target_value

    def create_room(self, team_number, num_students, target_value: Optional[str] = None,
                    mode: str = 'char') -> Room:
        """
        Create a waiting room.

        Args:
            team_number: Positive team identifier
            num_students: Expected participants; one target position each
            target_value: Secret to reconstruct; random when omitted
            mode: 'char' (grouped questions per character) or 'bit' (one bit each)

        Raises:
            ValidationError: If any argument is invalid
        """
        team_number = _integer(team_number, "Team number")
        if team_number < 1:
            raise ValidationError("Team number must be positive")
        num_students = _integer(num_students, "Student count")
        if not MIN_STUDENTS <= num_students <= MAX_STUDENTS:
            raise ValidationError(f"Student count must be between {MIN_STUDENTS} and {MAX_STUDENTS}")
        if mode not in ROOM_MODES:
            raise ValidationError(f"Mode must be one of: {', '.join(ROOM_MODES)}")

        if target_value is None or target_value == '':
            target_value = self._random_target(mode, num_students)
        target_value = self._check_target(target_value, mode, num_students)

        def build_room() -> Room:
            return Room(
                id='',
                room_code=random_code(self.rng, ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH),
                team_number=team_number,
                expected_count=num_students,
                target_value=target_value,
                mode=mode,
                status=RoomStatus.WAITING,
                created_at=utc_now(),
            )

        room = self.repository.create_room(build_room)
        room_logger.log_room_event(room.room_code, 'room_created',
                                   team_number=team_number, expected_count=num_students, mode=mode)
        return room

    def start_room(self, room_code: str) -> Dict[str, Any]:
        """
        Move a room from waiting to active.

        Raises:
            NotFoundError: If the room does not exist
            StateError: If the room is not waiting
        """
        room = self.repository.find_room_by_code(room_code)
        if room.status is not RoomStatus.WAITING:
            raise StateError("Game is not in waiting state")

        room = self.repository.activate_room(room, utc_now())
        room_logger.log_room_event(room.room_code, 'room_started')
        return self.room_state(room)

    def get_room_state(self, room_code: str) -> Dict[str, Any]:
        return self.room_state(self.repository.find_room_by_code(room_code))

    def room_state(self, room: Room) -> Dict[str, Any]:
        """Public room view. Positions nobody has solved show as '?'."""
        participants = self.repository.list_participants(room.id)
        solved = {p.position: p.solved_value for p in participants if p.is_completed}
        all_completed = len(solved) == room.expected_count

        return {
            'id': room.id,
            'room_code': room.room_code,
            'team_number': room.team_number,
            'expected_count': room.expected_count,
            'mode': room.mode,
            'status': room.status.value,
            'participant_count': len(participants),
            'participants': [
                {
                    'id': p.id,
                    'display_name': p.display_name,
                    'position': p.position,
                    'is_completed': p.is_completed,
                    'solved_value': p.solved_value,
                }
                for p in participants
            ],
            'solved_value': ''.join(solved.get(index, '?') for index in range(room.expected_count)),
            'all_completed': all_completed,
            'target_value': room.target_value if all_completed else None,
            'created_at': isoformat(room.created_at),
            'started_at': isoformat(room.started_at),
        }

    # Participants

    def join_room(self, room_code: str, display_name) -> Participant:
        """
        Claim the next free position in a room and generate its questions.

        Raises:
            ValidationError: If the display name is missing
            NotFoundError: If the room does not exist
            CapacityError: If the room is full
        """
        if not isinstance(display_name, str) or not display_name.strip():
            raise ValidationError("Display name is required")
        display_name = display_name.strip()

        room = self.repository.find_room_by_code(room_code)
        grouped = room.mode == 'char'

        def build_participant(position: int) -> Participant:
            target_value = room.target_value[position]
            target_bits = character_to_bits(target_value) if grouped else target_value
            questions = generate_questions(target_bits, self.rng, grouped=grouped)
            keys = group_names(questions) if grouped else [FLAT_GROUP]
            return Participant(
                id='',
                room_id=room.id,
                display_name=display_name,
                position=position,
                target_value=target_value,
                target_bits=target_bits,
                questions=questions,
                progress={key: GroupProgress() for key in keys},
                joined_at=utc_now(),
            )

        participant = self.repository.claim_next_position(room, build_participant)
        room_logger.log_room_event(room.room_code, 'participant_joined',
                                   display_name=display_name, position=participant.position,
                                   questions=len(participant.questions))
        return participant

    def load_questions(self, participant_id: str) -> List[Question]:
        """Stored question set; never regenerated."""
        return self.repository.find_participant(participant_id).questions

    def get_participant(self, participant_id: str) -> Dict[str, Any]:
        participant = self.repository.find_participant(participant_id)
        room = self.repository.find_room(participant.room_id)
        return self.participant_view(participant, room)

    def participant_view(self, participant: Participant, room: Room) -> Dict[str, Any]:
        """Public participant view; answers and bits only for completed groups."""
        def revealed(question: Question) -> bool:
            key = question.group if question.group is not None else FLAT_GROUP
            return participant.progress[key].completed

        return {
            'id': participant.id,
            'display_name': participant.display_name,
            'position': participant.position,
            'mode': room.mode,
            'room': {
                'id': room.id,
                'room_code': room.room_code,
                'status': room.status.value,
            },
            'groups': {
                name: {'completed': group.completed, 'answers': list(group.answers)}
                for name, group in participant.progress.items()
            },
            'target_bits': revealed_bits(participant.questions, participant.progress),
            'questions': [q.to_public_dict(reveal=revealed(q)) for q in participant.questions],
            'is_completed': participant.is_completed,
            'solved_value': participant.solved_value,
            'completed_at': isoformat(participant.completed_at),
        }

    def submit_answers(self, participant_id: str, answers, group: Optional[str] = None) -> Dict[str, Any]:
        """
        Check one group's answers and store the outcome.

        A group that is already complete is left untouched and reported with
        already_completed. Otherwise the group is unlocked only if every
        answer is correct, and the participant completes only once every
        group is unlocked and the stored answers decode to the assigned
        target.

        Raises:
            NotFoundError: If the participant or room does not exist
            StateError: If the room has not been started
            ValidationError: If the group or answers are malformed
        """
        for _ in range(MAX_SUBMIT_ATTEMPTS):
            participant = self.repository.find_participant(participant_id)
            room = self.repository.find_room(participant.room_id)
            if room.status is not RoomStatus.ACTIVE:
                raise StateError("Game has not started yet")

            key = progress_key(participant.questions, group)
            current = participant.progress[key]
            if current.completed:
                return self._submission_response(participant, room, key, None, already_completed=True)

            result = validate_answers(participant.questions, answers, group)
            progress = dict(participant.progress)
            progress[key] = GroupProgress(answers=list(answers), completed=result.all_correct)

            is_completed, solved_value = evaluate_completion(
                participant.questions, progress, participant.target_value, room.mode
            )
            completed_at = utc_now() if is_completed else None

            if not self.repository.save_progress(participant, key, progress[key],
                                                 is_completed, solved_value, completed_at):
                continue

            participant.progress = progress
            participant.is_completed = is_completed
            participant.solved_value = solved_value
            participant.completed_at = completed_at
            participant.version += 1

            self._log_submission(room, participant, key, result.all_correct, progress)
            return self._submission_response(participant, room, key, result)

        raise StateError("Submission conflicted with concurrent updates; try again")

    def _log_submission(self, room: Room, participant: Participant, key: str,
                        group_correct: bool, progress: Dict[str, GroupProgress]):
        if group_correct:
            room_logger.log_room_event(room.room_code, 'group_completed',
                                       participant_id=participant.id, group=key)
        if participant.is_completed:
            room_logger.log_room_event(room.room_code, 'participant_completed',
                                       participant_id=participant.id, position=participant.position)
        elif all(g.completed for g in progress.values()):
            room_logger.log_room_event(room.room_code, 'completion_denied',
                                       participant_id=participant.id, position=participant.position)

    def _submission_response(self, participant: Participant, room: Room, key: str,
                             result, already_completed: bool = False) -> Dict[str, Any]:
        group_name = None if key == FLAT_GROUP else key
        group_completed = participant.progress[key].completed
        if already_completed:
            message = f"{group_name or 'Question set'} already completed"
        elif group_completed:
            message = f"{group_name or 'Question set'} completed!"
        else:
            message = f"{group_name or 'Question set'} incorrect. Try again."

        return {
            'room_code': room.room_code,
            'group': group_name,
            'correct': group_completed,
            'per_question': result.per_question if result else None,
            'group_completed': group_completed,
            'all_groups_completed': all(g.completed for g in participant.progress.values()),
            'is_completed': participant.is_completed,
            'solved_value': participant.solved_value,
            'target_bits': revealed_bits(participant.questions, participant.progress),
            'already_completed': already_completed,
            'message': message,
        }


def get_room_service() -> Optional[RoomService]:
    """Get the room service bound to the current application."""
    return getattr(current_app, 'room_service', None)
