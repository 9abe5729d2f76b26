"""
Services Package

Contains all business logic and service classes.
"""

from .room_repository import RoomRepository
from .room_service import RoomService, get_room_service

__all__ = [
    'RoomRepository',
    'RoomService', 'get_room_service'
]
