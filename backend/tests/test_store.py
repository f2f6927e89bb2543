import threading

from chessrelay.models import START_FEN
from chessrelay.services.rooms import sweep_expired

DAY = 24 * 60 * 60


def test_create_and_get(store, clock):
    room_id = store.create()
    room = store.get(room_id)
    assert room.id == room_id
    assert room.players == []
    assert room.fen == START_FEN
    assert room.status == 'waiting'
    assert room.created_at == clock()
    assert room_id in store
    assert len(store) == 1


def test_get_missing_returns_none(store):
    assert store.get('nope') is None
    assert store.get(None) is None


def test_delete_is_idempotent(store):
    room_id = store.create()
    store.delete(room_id)
    store.delete(room_id)
    assert store.get(room_id) is None
    assert len(store) == 0


def test_ids_not_reused_after_delete(store, monkeypatch):
    from chessrelay import store as store_module

    codes = iter(['aaaaaaaa', 'aaaaaaaa', 'bbbbbbbb'])
    monkeypatch.setattr(store_module, 'generate_room_id', lambda: next(codes))
    first = store.create()
    store.delete(first)
    second = store.create()
    assert first == 'aaaaaaaa'
    assert second == 'bbbbbbbb'


def test_locked_yields_none_for_missing_room(store):
    with store.locked('missing') as room:
        assert room is None


def test_locked_sees_deletion_made_while_waiting(store):
    room_id = store.create()
    entered = threading.Event()
    results = []

    def waiter():
        entered.wait()
        with store.locked(room_id) as room:
            results.append(room)

    t = threading.Thread(target=waiter)
    t.start()
    with store.locked(room_id):
        entered.set()
        store.delete(room_id)
    t.join(timeout=5)
    assert results == [None]


def test_sweep_removes_rooms_past_ttl(store, clock):
    old = store.create()
    clock.advance(DAY - 60)
    young = store.create()
    clock.advance(61)

    removed = sweep_expired(store, DAY)

    assert removed == [old]
    assert store.get(old) is None
    assert store.get(young) is not None


def test_sweep_ignores_status_and_activity(store, clock):
    room_id = store.create()
    room = store.get(room_id)
    room.status = 'playing'
    clock.advance(DAY)
    room.moves.append({'san': 'e4'})
    # exactly at the TTL is not yet expired
    assert sweep_expired(store, DAY) == []
    clock.advance(1)
    assert sweep_expired(store, DAY) == [room_id]


def test_sweep_with_explicit_now(store, clock):
    room_id = store.create()
    assert sweep_expired(store, DAY, now=clock() + DAY + 1) == [room_id]


def test_sweeper_disabled_in_tests(flask_app, store):
    from chessrelay.services.rooms import start_sweeper

    assert start_sweeper(flask_app, store) is False


def test_sweeper_starts_once_per_store(flask_app, store, monkeypatch):
    from chessrelay import socketio
    from chessrelay.services.rooms import start_sweeper

    started = []
    monkeypatch.setattr(socketio, 'start_background_task', lambda fn, *args: started.append(fn))
    flask_app.config['ENABLE_SWEEPER_IN_TESTS'] = True

    assert start_sweeper(flask_app, store) is True
    assert start_sweeper(flask_app, store) is False
    assert len(started) == 1
