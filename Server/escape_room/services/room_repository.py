"""
Room Repository

MongoDB persistence for rooms and participants. Participants live in their
own collection with a unique (room_id, position) index, which is what makes
position claims atomic: two joins racing for the same position cannot both
insert.
"""

from typing import Callable, List, Optional, Set

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..errors import CapacityError, NotFoundError, StateError
from ..models.room import GroupProgress, Participant, Room, RoomStatus
from ..utils.room_logger import room_logger


def _object_id(value: str, label: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(f"{label} not found")


class RoomRepository:
    """
    Storage handle passed into the room service.

    Args:
        database: pymongo Database (or a compatible stand-in in tests)
    """

    def __init__(self, database: Database):
        self.db = database
        self.rooms_collection = database.rooms
        self.participants_collection = database.participants

        self.rooms_collection.create_index("room_code", unique=True)
        self.participants_collection.create_index(
            [("room_id", ASCENDING), ("position", ASCENDING)], unique=True
        )

    # Rooms

    def create_room(self, build_room: Callable[[], Room], attempts: int = 5) -> Room:
        """
        Insert a room built by build_room, rebuilding it when the room code collides.

        Raises:
            StateError: If no free room code was found after all attempts
        """
        for _ in range(attempts):
            room = build_room()
            try:
                result = self.rooms_collection.insert_one(room.to_document())
            except DuplicateKeyError:
                room_logger.log_room_event(room.room_code, 'room_code_collision')
                continue
            room.id = str(result.inserted_id)
            return room
        raise StateError("Could not allocate a unique room code")

    def find_room_by_code(self, room_code: str) -> Room:
        document = self.rooms_collection.find_one({"room_code": (room_code or '').upper()})
        if not document:
            raise NotFoundError("Game room not found")
        return Room.from_document(document)

    def find_room(self, room_id: str) -> Room:
        document = self.rooms_collection.find_one({"_id": _object_id(room_id, "Game room")})
        if not document:
            raise NotFoundError("Game room not found")
        return Room.from_document(document)

    def activate_room(self, room: Room, started_at) -> Room:
        """
        Move a room from waiting to active in one conditional update.

        Raises:
            StateError: If the room is not waiting
        """
        result = self.rooms_collection.update_one(
            {"_id": ObjectId(room.id), "status": RoomStatus.WAITING.value},
            {"$set": {"status": RoomStatus.ACTIVE.value, "started_at": started_at}}
        )
        if result.modified_count == 0:
            raise StateError("Game is not in waiting state")

        room.status = RoomStatus.ACTIVE
        room.started_at = started_at
        return room

    # Participants

    def _taken_positions(self, room_id: str) -> Set[int]:
        return set(self.participants_collection.distinct("position", {"room_id": room_id}))

    def claim_next_position(self, room: Room, build_participant: Callable[[int], Participant]) -> Participant:
        """
        Claim the smallest free position and store the participant for it.

        build_participant is called with the candidate position and must
        return the complete participant (questions included), so the claim
        and the stored question set land in a single insert. A duplicate key
        means another join took that position first; the free positions are
        read again and the next one is tried.

        Raises:
            CapacityError: If every position is taken
        """
        for _ in range(room.expected_count + 1):
            taken = self._taken_positions(room.id)
            position = next((p for p in range(room.expected_count) if p not in taken), None)
            if position is None:
                raise CapacityError("Game room is full")

            participant = build_participant(position)
            try:
                result = self.participants_collection.insert_one(participant.to_document())
            except DuplicateKeyError:
                room_logger.log_room_event(room.room_code, 'position_conflict', position=position)
                continue

            participant.id = str(result.inserted_id)
            return participant

        raise CapacityError("No available positions")

    def find_participant(self, participant_id: str) -> Participant:
        document = self.participants_collection.find_one({"_id": _object_id(participant_id, "Student")})
        if not document:
            raise NotFoundError("Student not found")
        return Participant.from_document(document)

    def list_participants(self, room_id: str) -> List[Participant]:
        cursor = self.participants_collection.find({"room_id": room_id}).sort("position", ASCENDING)
        return [Participant.from_document(document) for document in cursor]

    def save_progress(self,
                      participant: Participant,
                      group_key: str,
                      progress: GroupProgress,
                      is_completed: bool,
                      solved_value: Optional[str],
                      completed_at) -> bool:
        """
        Write one submission's outcome in a single update.

        The update only applies if the stored version still matches the one
        the caller read; returns False when another submission got there
        first so the caller can reload and re-check.
        """
        update = {
            f"progress.{group_key}": progress.to_dict(),
            "is_completed": is_completed,
            "solved_value": solved_value,
            "completed_at": completed_at,
        }
        result = self.participants_collection.update_one(
            {"_id": ObjectId(participant.id), "version": participant.version},
            {"$set": update, "$inc": {"version": 1}}
        )
        return result.modified_count == 1
