"""Room domain services: seating, event routing, quotes and expiry.

This package contains the relay's protocol logic. It talks to the outside
world only through a RoomStore and a Transport, keeping Socket.IO and HTTP
concerns in the handler modules.
"""

from .presence import AdmitResult, admit
from .quotes import move_quote_category, random_quote
from .router import GameRouter
from .sweeper import start_sweeper, sweep_expired
