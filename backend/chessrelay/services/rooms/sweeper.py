import logging
import weakref
from typing import List, Optional

from chessrelay import socketio
from chessrelay.store import RoomStore

_started_for = weakref.WeakSet()


def sweep_expired(store: RoomStore, ttl_sec: float, now: Optional[float] = None,
                  logger: Optional[logging.Logger] = None) -> List[str]:
    """Delete every room older than `ttl_sec`, whatever its status.

    Age is measured from creation; activity does not extend a room's life.
    Each deletion happens under the room's lock so an in-flight event on
    that room finishes first. Returns the ids removed.
    """
    logger = logger or logging.getLogger(__name__)
    now = store.clock() if now is None else now
    removed = []
    for room_id, _ in store.items():
        with store.locked(room_id) as room:
            if room is None:
                continue
            if now - room.created_at > ttl_sec:
                store.delete(room_id)
                removed.append(room_id)
                logger.info(f"[sweep] cleaned up old game: {room_id} status={room.status}")
    return removed


def start_sweeper(app, store: RoomStore) -> bool:
    """Start the periodic sweep as a Socket.IO background task.

    - No-ops in TESTING mode unless ENABLE_SWEEPER_IN_TESTS is set
    - Starts at most once per store
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        return False
    if store in _started_for:
        return False
    _started_for.add(store)

    interval = int(app.config.get('SWEEP_INTERVAL_SEC', 3600))
    ttl = int(app.config.get('ROOM_TTL_SEC', 86400))
    app.logger.info(f"[sweep-set] interval={interval}s ttl={ttl}s")

    def _worker():
        while True:
            socketio.sleep(interval)
            with app.app_context():
                removed = sweep_expired(store, ttl, logger=app.logger)
                app.logger.debug(f"[sweep-fire] removed={len(removed)} remaining={len(store)}")

    socketio.start_background_task(_worker)
    return True
