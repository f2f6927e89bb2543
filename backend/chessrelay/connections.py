import threading
import uuid
from typing import Dict, Optional


class ConnectionRegistry:
    """Maps Socket.IO session ids to opaque connection tokens.

    Room state only ever holds tokens; the transport resolves them back to a
    live sid when it needs to deliver something.
    """

    def __init__(self):
        self._by_sid: Dict[str, str] = {}
        self._by_token: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, sid: str) -> str:
        with self._lock:
            token = self._by_sid.get(sid)
            if token is None:
                token = uuid.uuid4().hex
                self._by_sid[sid] = token
                self._by_token[token] = sid
            return token

    def token_for(self, sid: str) -> str:
        token = self._by_sid.get(sid)
        if token is None:
            # Handlers can fire before connect was seen (e.g. a reconnecting client)
            token = self.register(sid)
        return token

    def sid_for(self, token: Optional[str]) -> Optional[str]:
        if token is None:
            return None
        return self._by_token.get(token)

    def unregister(self, sid: str) -> Optional[str]:
        with self._lock:
            token = self._by_sid.pop(sid, None)
            if token is not None:
                self._by_token.pop(token, None)
            return token

    def __len__(self):
        return len(self._by_sid)
