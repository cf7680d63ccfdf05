import socket
import threading

import pytest

from rttbench import udp
from rttbench.messages import Reply, Request

IDENTITY = [[1, 0], [0, 1]]
SAMPLE = [[1, 2], [3, 4]]


@pytest.fixture
def udp_server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(1.0)
    port = sock.getsockname()[1]
    thread = threading.Thread(target=udp.handle_requests, args=(sock,), daemon=True)
    thread.start()
    yield port
    thread.join(timeout=5)


def test_encode_frame_wire_bytes():
    assert udp.encode_frame(b"{}") == b"00002{}\xff"


def test_frame_round_trip():
    payload = b'{"operation":"Mul","a":[[1]],"b":[[2]]}'
    assert udp.decode_frame(udp.encode_frame(payload)) == payload


def test_decode_frame_ignores_trailing_bytes():
    assert udp.decode_frame(b"00003abc\xffjunk") == b"abc"


def test_empty_payload_round_trip():
    assert udp.decode_frame(udp.encode_frame(b"")) == b""


@pytest.mark.parametrize("data", [b"12a45xyz", b"123", b"", b"-0001x"])
def test_decode_frame_rejects_bad_header(data):
    with pytest.raises(ValueError):
        udp.decode_frame(data)


def test_decode_frame_rejects_truncated_frame():
    with pytest.raises(ValueError):
        udp.decode_frame(b"00010abc")


def test_encode_frame_rejects_oversized_payload():
    with pytest.raises(ValueError):
        udp.encode_frame(b"x" * (udp.MAX_PAYLOAD + 1))


def test_server_answers_request(udp_server):
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
        client.settimeout(5)
        client.connect(("127.0.0.1", udp_server))
        request = Request("Mul", SAMPLE, IDENTITY)
        udp.send_message(client, request.to_json().encode("utf-8"))
        payload, addr = udp.receive_message(client)
    assert Reply.from_json(payload).r == SAMPLE
    assert addr[1] == udp_server


def test_handle_requests_rejects_wrong_operation():
    server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    server.bind(("127.0.0.1", 0))
    server.settimeout(5)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
        request = Request("Add", SAMPLE, IDENTITY)
        udp.send_message(client, request.to_json().encode("utf-8"), server.getsockname())
        with pytest.raises(ValueError):
            udp.handle_requests(server)
    assert server.fileno() == -1


def test_handle_requests_returns_on_timeout():
    server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    server.bind(("127.0.0.1", 0))
    server.settimeout(0.1)
    assert udp.handle_requests(server) is None
    assert server.fileno() == -1


def test_run_client_summarises_round_trips(udp_server):
    summary = udp.run_client(5, 3, 10, "127.0.0.1", udp_server)
    assert summary.average >= 0
    assert summary.median >= 0
    assert summary.variance >= 0
    assert summary.standard_deviation == pytest.approx(summary.variance**0.5)