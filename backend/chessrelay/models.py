import uuid
from typing import Any, Dict, List, Optional

WHITE = 'white'
BLACK = 'black'

STATUS_WAITING = 'waiting'
STATUS_PLAYING = 'playing'
STATUS_CHECKMATE = 'checkmate'
STATUS_DRAW = 'draw'
STATUS_RESIGNED = 'resigned'
TERMINAL_STATUSES = frozenset({STATUS_CHECKMATE, STATUS_DRAW, STATUS_RESIGNED})

START_FEN = 'rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1'
MAX_PLAYERS = 2


def opposite_color(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def generate_room_id(length: int = 8) -> str:
    """Generate a short room code from the head of a random UUID."""
    return uuid.uuid4().hex[:length]


class Participant:
    """A seated player. `connection` is an opaque token, never a socket."""

    def __init__(self, connection: str, name: str, color: str):
        self.connection = connection
        self.name = name
        self.color = color

    def to_dict(self):
        return {
            'name': self.name,
            'color': self.color,
        }


class Room:
    def __init__(self, room_id: str, created_at: float):
        self.id = room_id
        self.players: List[Participant] = []
        self.fen = START_FEN
        self.moves: List[Any] = []
        self.status = STATUS_WAITING
        self.winner: Optional[str] = None
        self.created_at = created_at

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def find_player(self, name: str) -> Optional[Participant]:
        # First match wins if two seats ever share a name
        for p in self.players:
            if p.name == name:
                return p
        return None

    def player_for_connection(self, connection: str) -> Optional[Participant]:
        for p in self.players:
            if p.connection == connection:
                return p
        return None

    def finish(self, status: str, winner: Optional[str] = None) -> bool:
        """Record a terminal outcome. The first outcome recorded sticks."""
        if self.is_finished:
            return False
        self.status = status
        if winner is not None:
            self.winner = winner
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'players': [p.to_dict() for p in self.players],
            'fen': self.fen,
            'moves': list(self.moves),
            'status': self.status,
            'createdAt': int(self.created_at * 1000),
        }
        if self.winner is not None:
            data['winner'] = self.winner
        return data
