"""
Room Data Models

Contains the room and participant records as stored in MongoDB.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .puzzle import Question

# Progress key used when a question set has no groups
FLAT_GROUP = 'bits'


class RoomStatus(Enum):
    """Room lifecycle."""
    WAITING = "waiting"
    ACTIVE = "active"


@dataclass
class Room:
    """A game session with its secret target value."""
    id: str
    room_code: str
    team_number: int
    expected_count: int
    target_value: str
    mode: str  # "char" or "bit"
    status: RoomStatus = RoomStatus.WAITING
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            'room_code': self.room_code,
            'team_number': self.team_number,
            'expected_count': self.expected_count,
            'target_value': self.target_value,
            'mode': self.mode,
            'status': self.status.value,
            'created_at': self.created_at,
            'started_at': self.started_at,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'Room':
        return cls(
            id=str(document['_id']),
            room_code=document['room_code'],
            team_number=document['team_number'],
            expected_count=document['expected_count'],
            target_value=document['target_value'],
            mode=document['mode'],
            status=RoomStatus(document['status']),
            created_at=document.get('created_at'),
            started_at=document.get('started_at'),
        )


@dataclass
class GroupProgress:
    """Last submitted answers for one group and whether they unlocked it."""
    answers: List[int] = field(default_factory=list)
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'answers': list(self.answers), 'completed': self.completed}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GroupProgress':
        return cls(answers=list(data.get('answers', [])), completed=bool(data.get('completed', False)))


@dataclass
class Participant:
    """A student holding one position of the room's target value."""
    id: str
    room_id: str
    display_name: str
    position: int
    target_value: str
    target_bits: str
    questions: List[Question]
    progress: Dict[str, GroupProgress]
    is_completed: bool = False
    solved_value: Optional[str] = None
    completed_at: Optional[datetime] = None
    joined_at: Optional[datetime] = None
    version: int = 0

    def to_document(self) -> Dict[str, Any]:
        return {
            'room_id': self.room_id,
            'display_name': self.display_name,
            'position': self.position,
            'target_value': self.target_value,
            'target_bits': self.target_bits,
            'questions': [question.to_dict() for question in self.questions],
            'progress': {name: group.to_dict() for name, group in self.progress.items()},
            'is_completed': self.is_completed,
            'solved_value': self.solved_value,
            'completed_at': self.completed_at,
            'joined_at': self.joined_at,
            'version': self.version,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'Participant':
        return cls(
            id=str(document['_id']),
            room_id=document['room_id'],
            display_name=document['display_name'],
            position=document['position'],
            target_value=document['target_value'],
            target_bits=document['target_bits'],
            questions=[Question.from_dict(question) for question in document['questions']],
            progress={name: GroupProgress.from_dict(group) for name, group in document['progress'].items()},
            is_completed=document.get('is_completed', False),
            solved_value=document.get('solved_value'),
            completed_at=document.get('completed_at'),
            joined_at=document.get('joined_at'),
            version=document.get('version', 0),
        )
