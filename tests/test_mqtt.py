import socket

import pytest

from rttbench import mqtt
from rttbench.matrix import multiply
from rttbench.messages import Reply, Request


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_on_request_multiplies_and_keeps_client_id():
    a = [[1, 2], [3, 4]]
    b = [[5, 6], [7, 8]]
    payload = Request(mqtt.OPERATION, a, b, "client-one").to_json().encode("utf-8")

    reply = Reply.from_json(mqtt.on_request(payload))

    assert reply.r == multiply(a, b)
    assert reply.client_id == "client-one"


def test_on_request_does_not_check_operation():
    a = [[2, 0], [0, 2]]
    b = [[1, 1], [1, 1]]
    payload = Request("anything", a, b, "c").to_json().encode("utf-8")

    reply = Reply.from_json(mqtt.on_request(payload))

    assert reply.r == multiply(a, b)


def test_on_request_with_mismatched_shapes_has_no_result():
    payload = Request(mqtt.OPERATION, [[1, 2]], [[1, 2]], "c").to_json().encode("utf-8")

    reply = Reply.from_json(mqtt.on_request(payload))

    assert reply.r is None
    assert reply.client_id == "c"


@pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b'{"a": "text"}'])
def test_on_request_rejects_undecodable_payload(payload):
    assert mqtt.on_request(payload) is None


def test_run_client_rejects_negative_invocations():
    with pytest.raises(ValueError):
        mqtt.run_client(-1, [[1]], [[1]], "127.0.0.1", _closed_port(), "unused.txt")


def test_run_client_fails_without_broker(tmp_path):
    results = tmp_path / "rtt.txt"
    with pytest.raises(OSError):
        mqtt.run_client(1, [[1]], [[1]], "127.0.0.1", _closed_port(), str(results))
    assert not results.exists()


def test_serve_fails_without_broker():
    with pytest.raises(OSError):
        mqtt.serve("127.0.0.1", _closed_port())