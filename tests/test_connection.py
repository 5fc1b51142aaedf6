import logging

import pytest

from sfu_ws.connection import Connection
from sfu_ws.dispatcher import Dispatcher
from sfu_ws.errors import InvalidStateError, TransportError
from sfu_ws.handshake import HandshakeDescriptor
from sfu_ws.message import ConnectionState, Frame, LifecycleKind
from sfu_ws.wire import pack_frame

from .conftest import FakeTransport


@pytest.fixture
def dispatcher():
    return Dispatcher()


@pytest.fixture
def transport(settings):
    return FakeTransport(settings)


@pytest.fixture
def conn(transport, dispatcher, settings):
    return Connection(transport, dispatcher, settings)


DESC = HandshakeDescriptor({"action": "connect", "room_id": 42})


def test_open_moves_to_connecting_and_dials_uri(conn, transport):
    assert conn.state is ConnectionState.IDLE
    conn.open(DESC)
    assert conn.state is ConnectionState.CONNECTING
    assert transport.connected_to == conn.uri
    assert conn.uri.startswith("ws://HOST/ws/connect/")


def test_open_event_transitions_and_notifies(conn, transport, dispatcher):
    kinds = []
    dispatcher.on_lifecycle(lambda e: kinds.append(e.kind))
    conn.open(DESC)
    transport.fire_open()
    assert conn.state is ConnectionState.OPEN
    assert kinds == [LifecycleKind.OPEN]


def test_connection_is_single_use(conn, transport):
    conn.open(DESC)
    with pytest.raises(InvalidStateError):
        conn.open(DESC)
    transport.fire_close()
    with pytest.raises(InvalidStateError):
        conn.open(DESC)


@pytest.mark.parametrize("drive", ["idle", "connecting", "closing", "closed"])
def test_send_outside_open_never_reaches_socket(conn, transport, drive, caplog):
    if drive != "idle":
        conn.open(DESC)
    if drive in ("closing", "closed"):
        transport.fire_open()
        conn.close()
    if drive == "closed":
        transport.fire_close()
    with caplog.at_level(logging.WARNING, logger="sfu_ws.connection"):
        assert conn.send(b"\x00\x00\x00\x00hi") is False
    assert transport.sent == []
    assert conn.frames_dropped == 1
    assert "dropping" in caplog.text


def test_send_when_open(conn, transport):
    conn.open(DESC)
    transport.fire_open()
    assert conn.send(b"abcd") is True
    assert transport.sent == [b"abcd"]
    assert conn.frames_sent == 1


def test_inbound_frames_are_decoded_and_dispatched_in_order(conn, transport, dispatcher):
    seen = []
    dispatcher.on_frame(seen.append)
    conn.open(DESC)
    transport.fire_open()
    for i in range(5):
        transport.fire_receive(pack_frame(i, f"m{i}"))
    assert seen == [Frame(i, f"m{i}".encode()) for i in range(5)]
    assert conn.frames_received == 5


def test_malformed_frame_is_discarded_and_connection_stays_open(conn, transport, dispatcher, caplog):
    seen = []
    dispatcher.on_frame(seen.append)
    conn.open(DESC)
    transport.fire_open()
    with caplog.at_level(logging.WARNING, logger="sfu_ws.connection"):
        transport.fire_receive(b"\x01\x02")
    transport.fire_receive(pack_frame(1, b"ok"))
    assert seen == [Frame(1, b"ok")]
    assert conn.state is ConnectionState.OPEN
    assert "malformed" in caplog.text


def test_header_only_frame_is_not_a_decode_failure(conn, transport, dispatcher, caplog):
    seen = []
    dispatcher.on_frame(seen.append)
    conn.open(DESC)
    transport.fire_open()
    with caplog.at_level(logging.DEBUG, logger="sfu_ws.connection"):
        transport.fire_receive(b"\x07\x00\x00\x00")
    assert seen == [Frame(7, b"")]
    assert "malformed" not in caplog.text


def test_close_from_idle_goes_straight_to_closed(conn, transport):
    conn.close()
    assert conn.state is ConnectionState.CLOSED
    assert transport.close_calls == 0


@pytest.mark.parametrize("opened", [False, True])
def test_close_requests_socket_close_once(conn, transport, opened):
    conn.open(DESC)
    if opened:
        transport.fire_open()
    conn.close()
    conn.close()
    assert conn.state is ConnectionState.CLOSING
    assert transport.close_calls == 1
    transport.fire_close()
    assert conn.state is ConnectionState.CLOSED
    assert conn.transport is None
    conn.close()
    assert transport.close_calls == 1


def test_late_open_after_close_does_not_reopen(conn, transport):
    conn.open(DESC)
    conn.close()
    transport.fire_open()
    assert conn.state is ConnectionState.CLOSING
    transport.fire_close()
    transport.fire_open()
    assert conn.state is ConnectionState.CLOSED


def test_error_is_reported_then_close_transitions(conn, transport, dispatcher):
    events = []
    dispatcher.on_lifecycle(events.append)
    conn.open(DESC)
    transport.fire_open()
    transport.fire_error("reset by peer")
    assert conn.state is ConnectionState.OPEN
    transport.fire_close()
    assert conn.state is ConnectionState.CLOSED
    assert [e.kind for e in events] == [LifecycleKind.OPEN, LifecycleKind.ERROR, LifecycleKind.CLOSE]
    assert isinstance(events[1].detail, TransportError)
    assert str(events[1].detail) == "reset by peer"


def test_unexpected_close_from_connecting(conn, transport, dispatcher):
    kinds = []
    dispatcher.on_lifecycle(lambda e: kinds.append(e.kind))
    conn.open(DESC)
    transport.fire_close()
    transport.fire_close()
    assert conn.state is ConnectionState.CLOSED
    assert kinds == [LifecycleKind.CLOSE]
