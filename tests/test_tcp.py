import socket
import threading

import pytest

from rttbench import tcp
from rttbench.messages import Reply, Request

IDENTITY = [[1, 0], [0, 1]]
SAMPLE = [[1, 2], [3, 4]]


@pytest.fixture
def connection_pair():
    server_end, client_end = socket.socketpair()
    client_end.settimeout(5)
    thread = threading.Thread(target=tcp.handle_connection, args=(server_end,), daemon=True)
    thread.start()
    yield client_end
    client_end.close()
    thread.join(timeout=5)


def test_reply_wire_format(connection_pair):
    request = Request("Mul", SAMPLE, IDENTITY)
    connection_pair.sendall(request.to_json().encode("utf-8") + b"\n")
    with connection_pair.makefile("rb") as reader:
        line = reader.readline()
    assert line == b'{"r":[[1,2],[3,4]]}\n'


def test_several_requests_on_one_connection(connection_pair):
    first = Request("Mul", SAMPLE, IDENTITY)
    second = Request("Mul", IDENTITY, SAMPLE)
    payload = first.to_json() + "\n\n" + second.to_json() + "\n"
    connection_pair.sendall(payload.encode("utf-8"))
    with connection_pair.makefile("rb") as reader:
        replies = [Reply.from_json(reader.readline()) for _ in range(2)]
    assert [reply.r for reply in replies] == [SAMPLE, SAMPLE]


def test_handle_connection_rejects_wrong_operation():
    server_end, client_end = socket.socketpair()
    with client_end:
        client_end.sendall(Request("Add", SAMPLE, IDENTITY).to_json().encode() + b"\n")
        client_end.shutdown(socket.SHUT_WR)
        with pytest.raises(ValueError):
            tcp.handle_connection(server_end)
    assert server_end.fileno() == -1


def test_handle_connection_returns_at_end_of_stream():
    server_end, client_end = socket.socketpair()
    client_end.shutdown(socket.SHUT_WR)
    assert tcp.handle_connection(server_end) is None
    assert server_end.fileno() == -1
    client_end.close()


def test_run_client_summarises_round_trips():
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]

    def accept_one():
        conn, _ = listener.accept()
        tcp.handle_connection(conn)

    thread = threading.Thread(target=accept_one, daemon=True)
    thread.start()
    try:
        summary = tcp.run_client(4, 3, 10, "127.0.0.1", port)
    finally:
        thread.join(timeout=5)
        listener.close()
    assert summary.average >= 0
    assert summary.median >= 0
    assert summary.variance >= 0
    assert not thread.is_alive()


def test_run_client_fails_when_server_hangs_up():
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]

    def accept_and_close():
        conn, _ = listener.accept()
        conn.close()

    thread = threading.Thread(target=accept_and_close, daemon=True)
    thread.start()
    try:
        with pytest.raises(ConnectionError):
            tcp.run_client(1, 2, 10, "127.0.0.1", port)
    finally:
        thread.join(timeout=5)
        listener.close()