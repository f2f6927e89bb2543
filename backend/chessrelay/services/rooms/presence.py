from typing import NamedTuple, Optional

from chessrelay.models import BLACK, STATUS_PLAYING, STATUS_WAITING, WHITE, MAX_PLAYERS, Participant, Room
from chessrelay.store import RoomStore

REJOINED = 'rejoined'
SEATED = 'seated'
SPECTATOR = 'spectator'
NOT_FOUND = 'not_found'


class AdmitResult(NamedTuple):
    kind: str
    color: Optional[str] = None
    room: Optional[Room] = None

    @property
    def is_player(self) -> bool:
        return self.kind in (REJOINED, SEATED)


def admit(store: RoomStore, room_id: str, display_name: str, connection: str) -> AdmitResult:
    """Resolve a connection and display name to a seat in a room.

    - an exact, case-sensitive name match rejoins the first seat with that
      name and takes over its connection
    - otherwise the first two names get white then black; seating the second
      player starts the game
    - anyone else watches as a spectator

    Unknown rooms are reported as NOT_FOUND and nothing changes. Subscribing
    the connection to the room's broadcast group is left to the caller.
    """
    with store.locked(room_id) as room:
        if room is None:
            return AdmitResult(NOT_FOUND)

        existing = room.find_player(display_name)
        if existing is not None:
            existing.connection = connection
            return AdmitResult(REJOINED, existing.color, room)

        if room.is_full:
            return AdmitResult(SPECTATOR, None, room)

        color = WHITE if not room.players else BLACK
        room.players.append(Participant(connection=connection, name=display_name, color=color))
        if len(room.players) == MAX_PLAYERS and room.status == STATUS_WAITING:
            room.status = STATUS_PLAYING
        return AdmitResult(SEATED, color, room)
