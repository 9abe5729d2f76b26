"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .puzzle import GateKind, GateSpec, Question, QuestionKind, ValidationResult
from .room import FLAT_GROUP, GroupProgress, Participant, Room, RoomStatus

__all__ = [
    'GateKind', 'GateSpec', 'Question', 'QuestionKind', 'ValidationResult',
    'FLAT_GROUP', 'GroupProgress', 'Participant', 'Room', 'RoomStatus'
]
