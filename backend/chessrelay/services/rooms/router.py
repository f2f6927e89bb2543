import logging
from typing import Any, Callable, Dict, Optional, Protocol

from chessrelay.errors import GameOver, MalformedEvent, RelayError, RoomNotFound
from chessrelay.models import (
    BLACK,
    STATUS_CHECKMATE,
    STATUS_DRAW,
    STATUS_RESIGNED,
    WHITE,
    opposite_color,
)
from chessrelay.store import RoomStore
from .presence import REJOINED, SPECTATOR, NOT_FOUND, admit
from .quotes import CHECKMATE, DRAW, GAME_START, move_quote_category, random_quote

JOIN_NOT_FOUND_MESSAGE = 'Game not found. Perhaps it exists only in memory.'
SPECTATOR_MESSAGE = 'This game already has two players. You may only observe.'


class Transport(Protocol):
    """Delivery side of the relay. Connections are opaque tokens."""

    def send(self, connection: str, event: str, payload: Dict[str, Any]) -> None: ...

    def broadcast(self, room_id: str, event: str, payload: Dict[str, Any], skip: Optional[str] = None) -> None: ...

    def subscribe(self, connection: str, room_id: str) -> None: ...

    def unsubscribe(self, connection: str, room_id: str) -> None: ...


def _require(data, *fields):
    if not isinstance(data, dict):
        raise MalformedEvent('Event payload must be an object')
    for field in fields:
        if data.get(field) in (None, ''):
            raise MalformedEvent(f'{field} is required')
    if not isinstance(data.get('gameId', ''), str):
        raise MalformedEvent('gameId must be a string')
    return data


class GameRouter:
    """Applies inbound room events to the store and fans out the results.

    Every handler takes the sender's connection token and the raw event
    payload. Events touching a room run under that room's lock, and their
    broadcasts go out before the lock is released so that every member sees
    a room's events in the order they were applied.
    """

    EVENTS = (
        'join-game',
        'make-move',
        'offer-draw',
        'decline-draw',
        'accept-draw',
        'resign',
        'send-message',
        'leave-game',
    )

    def __init__(self, store: RoomStore, transport: Transport, logger: Optional[logging.Logger] = None,
                 quote: Callable[[Optional[str]], str] = random_quote):
        self.store = store
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.quote = quote

    def handle(self, event: str, connection: str, data: Any) -> None:
        """Run one inbound event; failures go back to the sender as `error`."""
        if event not in self.EVENTS:
            raise KeyError(event)
        handler = getattr(self, event.replace('-', '_'))
        try:
            handler(connection, data)
        except RelayError as exc:
            self.logger.warning(f"[{event}] rejected from {connection}: {exc.message}")
            self.transport.send(connection, 'error', {'message': exc.message})

    # ---- Seating ----

    def join_game(self, connection: str, data: Any) -> None:
        _require(data, 'gameId', 'playerName')
        room_id = data['gameId']
        name = data['playerName']
        with self.store.locked(room_id) as room:
            result = admit(self.store, room_id, name, connection)
            if result.kind == NOT_FOUND:
                raise RoomNotFound(room_id, JOIN_NOT_FOUND_MESSAGE)

            self.transport.subscribe(connection, room_id)
            game = room.to_dict()

            if result.kind == SPECTATOR:
                self.transport.send(connection, 'error', {'message': SPECTATOR_MESSAGE})
                self.transport.send(connection, 'spectator-joined', {'game': game})
                self.logger.info(f"[join] {name} is watching game {room_id}")
                return

            self.transport.send(connection, 'game-joined', {
                'game': game,
                'color': result.color,
                'quote': self.quote(GAME_START),
            })
            if result.kind == REJOINED:
                self.logger.info(f"[join] {name} rejoined game {room_id} as {result.color}")
                return

            self.transport.broadcast(room_id, 'player-joined', {
                'playerName': name,
                'color': result.color,
                'game': game,
            }, skip=connection)
            self.logger.info(f"[join] {name} joined game {room_id} as {result.color}")

    # ---- Game events ----

    def make_move(self, connection: str, data: Any) -> None:
        _require(data, 'gameId', 'fen')
        room_id = data['gameId']
        is_checkmate = bool(data.get('isCheckmate'))
        is_draw = bool(data.get('isDraw'))
        with self.store.locked(room_id) as room:
            if room is None:
                raise RoomNotFound(room_id)
            if room.is_finished:
                raise GameOver(room_id)
            # The sender's rules engine is trusted; fen and flags are not re-checked
            move = data.get('move')
            room.fen = data['fen']
            room.moves.append(move)
            if is_checkmate:
                room.finish(STATUS_CHECKMATE)
            elif is_draw:
                room.finish(STATUS_DRAW)

            category = move_quote_category(
                is_capture=bool(data.get('isCapture')),
                is_check=bool(data.get('isCheck')),
                is_checkmate=is_checkmate,
                is_draw=is_draw,
            )
            self.transport.broadcast(room_id, 'move-made', {
                'move': move,
                'fen': room.fen,
                'game': room.to_dict(),
                'quote': self.quote(category) if category else None,
            })
            self.logger.debug(f"[move] game={room_id} ply={len(room.moves)} status={room.status}")

    def offer_draw(self, connection: str, data: Any) -> None:
        self._signal_others(connection, data, 'draw-offered')

    def decline_draw(self, connection: str, data: Any) -> None:
        self._signal_others(connection, data, 'draw-declined')

    def accept_draw(self, connection: str, data: Any) -> None:
        _require(data, 'gameId')
        room_id = data['gameId']
        with self.store.locked(room_id) as room:
            if room is None:
                raise RoomNotFound(room_id)
            if not room.finish(STATUS_DRAW):
                raise GameOver(room_id)
            self.transport.broadcast(room_id, 'game-draw', {'quote': self.quote(DRAW)})
            self.logger.info(f"[draw] game={room_id} agreed drawn")

    def resign(self, connection: str, data: Any) -> None:
        _require(data, 'gameId', 'color')
        room_id = data['gameId']
        color = data['color']
        if color not in (WHITE, BLACK):
            raise MalformedEvent('color must be white or black')
        with self.store.locked(room_id) as room:
            if room is None:
                raise RoomNotFound(room_id)
            if not room.finish(STATUS_RESIGNED, winner=opposite_color(color)):
                raise GameOver(room_id)
            self.transport.broadcast(room_id, 'player-resigned', {
                'color': color,
                'winner': room.winner,
                'quote': self.quote(CHECKMATE),
            })
            self.logger.info(f"[resign] game={room_id} {color} resigned, winner={room.winner}")

    # ---- Chat and membership ----

    def send_message(self, connection: str, data: Any) -> None:
        _require(data, 'gameId')
        room_id = data['gameId']
        if self.store.get(room_id) is None:
            raise RoomNotFound(room_id)
        # Chat is relayed only, never stored on the room
        self.transport.broadcast(room_id, 'chat-message', {
            'message': data.get('message'),
            'playerName': data.get('playerName'),
            'timestamp': int(self.store.clock() * 1000),
        })

    def leave_game(self, connection: str, data: Any) -> None:
        _require(data, 'gameId')
        room_id = data['gameId']
        if self.store.get(room_id) is None:
            raise RoomNotFound(room_id)
        # The seat is kept so the same name can rejoin later
        self.transport.unsubscribe(connection, room_id)
        self.transport.send(connection, 'left', {'gameId': room_id})

    def disconnect(self, connection: str) -> int:
        """Tell the other members of every room where `connection` holds a seat.

        Seats and statuses are left alone. Returns the number of rooms notified.
        """
        notified = 0
        for room_id, _ in self.store.items():
            with self.store.locked(room_id) as room:
                if room is None:
                    continue
                player = room.player_for_connection(connection)
                if player is None:
                    continue
                self.transport.broadcast(room_id, 'player-disconnected', {
                    'playerName': player.name,
                    'color': player.color,
                }, skip=connection)
                notified += 1
                self.logger.info(f"[disconnect] {player.name} ({player.color}) left game {room_id}")
        return notified

    def _signal_others(self, connection: str, data: Any, event: str) -> None:
        _require(data, 'gameId')
        room_id = data['gameId']
        if self.store.get(room_id) is None:
            raise RoomNotFound(room_id)
        self.transport.broadcast(room_id, event, {}, skip=connection)
