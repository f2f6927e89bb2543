class RelayError(Exception):
    """Base class for per-event failures reported back to the sender."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RoomNotFound(RelayError):
    def __init__(self, room_id=None, message: str = 'Game not found'):
        super().__init__(message)
        self.room_id = room_id


class MalformedEvent(RelayError):
    pass


class GameOver(RelayError):
    def __init__(self, room_id=None, message: str = 'This game is already over'):
        super().__init__(message)
        self.room_id = room_id
