import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from chessrelay.models import Room, generate_room_id


class RoomStore:
    """In-memory rooms keyed by id.

    One instance is created per application and handed to whatever needs it;
    there is no module-level room map. All mutation of a single room should
    happen inside ``locked(room_id)`` so that joins, moves and the sweeper
    never interleave on the same room.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._rooms: Dict[str, Room] = {}
        self._issued: Set[str] = set()
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def create(self) -> str:
        with self._guard:
            room_id = generate_room_id()
            # Ids are never handed out twice in one process, even after deletion
            while room_id in self._issued:
                room_id = generate_room_id()
            self._issued.add(room_id)
            self._rooms[room_id] = Room(room_id, created_at=self.clock())
            self._locks[room_id] = threading.RLock()
        return room_id

    def get(self, room_id: Optional[str]) -> Optional[Room]:
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def delete(self, room_id: str) -> None:
        with self._guard:
            self._rooms.pop(room_id, None)
            self._locks.pop(room_id, None)

    def items(self) -> List[Tuple[str, Room]]:
        with self._guard:
            return list(self._rooms.items())

    def __iter__(self) -> Iterator[Tuple[str, Room]]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    @contextmanager
    def locked(self, room_id: Optional[str]) -> Iterator[Optional[Room]]:
        """Hold the room's lock and yield the room, or None if it is gone."""
        with self._guard:
            lock = self._locks.get(room_id) if room_id is not None else None
        if lock is None:
            yield None
            return
        with lock:
            # The room may have been swept while we waited
            yield self._rooms.get(room_id)
