"""Remote procedure calls for matrix multiplication.

Calls travel over TCP as newline-delimited JSON objects of the form
``{"method": ..., "params": [...], "id": ...}`` and are answered with
``{"id": ..., "result": ..., "error": ...}``.
"""

from __future__ import annotations

import json
import socket
import threading
import time
from collections.abc import Callable
from typing import Any, BinaryIO

from rttbench.matrix import multiply
from rttbench.messages import OPERATION, Reply, Request
from rttbench.results import write_rtt_value

SERVICE_NAME = "Matrix"
MULTIPLY_METHOD = f"{SERVICE_NAME}.Multiply"
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_ADDRESS = "rpc-server:8080"
DEFAULT_RESULTS_PATH = "/data/go-rpc-results.txt"


class MatrixService:
    """The remote service registered under the name ``Matrix``."""

    def multiply(self, request: Request) -> Reply:
        """Multiply the request's matrices; the operation field is not consulted."""
        return Reply(r=multiply(request.a, request.b))


def _encode(message: dict[str, Any]) -> bytes:
    return json.dumps(message, separators=(",", ":")).encode("utf-8") + b"\n"


def _error(call_id: Any, message: str) -> dict[str, Any]:
    return {"id": call_id, "result": None, "error": message}


def _dispatch(methods: dict[str, Callable[[Request], Reply]], line: bytes) -> dict[str, Any]:
    try:
        call = json.loads(line)
    except ValueError as exc:
        return _error(None, f"rpc: invalid request: {exc}")
    if not isinstance(call, dict):
        return _error(None, "rpc: request must be a JSON object")
    call_id = call.get("id")
    method = call.get("method")
    if not isinstance(method, str) or "." not in method:
        return _error(call_id, f"rpc: service/method request ill-formed: {method}")
    if method.split(".", 1)[0] != SERVICE_NAME:
        return _error(call_id, f"rpc: can't find service {method}")
    handler = methods.get(method)
    if handler is None:
        return _error(call_id, f"rpc: can't find method {method}")
    params = call.get("params")
    if not isinstance(params, list) or len(params) != 1:
        return _error(call_id, "rpc: expected exactly one parameter")
    try:
        reply = handler(Request.from_dict(params[0]))
    except ValueError as exc:
        return _error(call_id, str(exc))
    return {"id": call_id, "result": reply.to_dict(), "error": None}


def _serve_connection(conn: socket.socket, service: MatrixService) -> None:
    methods = {MULTIPLY_METHOD: service.multiply}
    with conn, conn.makefile("rb") as reader, conn.makefile("wb") as writer:
        for line in reader:
            if not line.strip():
                continue
            writer.write(_encode(_dispatch(methods, line)))
            writer.flush()


def serve(host: str = DEFAULT_LISTEN_HOST, port: int = DEFAULT_PORT) -> None:
    """Serve the matrix service, one thread per connection."""
    service = MatrixService()
    with socket.create_server((host, port)) as listener:
        print(f"Server listening on port {port}")
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                print("Connection error:", exc)
                continue
            threading.Thread(
                target=_serve_connection, args=(conn, service), daemon=True
            ).start()


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"address must be host:port, got {address!r}")
    return host.strip("[]"), int(port)


def _call(
    reader: BinaryIO, writer: BinaryIO, call_id: int, method: str, request: Request
) -> Reply:
    writer.write(_encode({"method": method, "params": [request.to_dict()], "id": call_id}))
    writer.flush()
    line = reader.readline()
    if not line:
        raise ConnectionError("server closed the connection")
    response = json.loads(line)
    if response.get("id") != call_id:
        raise ValueError(f"reply for call {response.get('id')!r}, expected {call_id}")
    if response.get("error"):
        raise RuntimeError(response["error"])
    return Reply.from_dict(response.get("result") or {})


def run_client(
    invocations: int,
    a: list[list[int]],
    b: list[list[int]],
    address: str = DEFAULT_ADDRESS,
    results_path: str = DEFAULT_RESULTS_PATH,
) -> None:
    """Call ``Matrix.Multiply`` repeatedly, appending each round-trip time in ms."""
    host, port = _split_address(address)
    with socket.create_connection((host, port)) as conn, conn.makefile(
        "rb"
    ) as reader, conn.makefile("wb") as writer:
        for call_id in range(invocations):
            request = Request(OPERATION, a, b)
            start = time.perf_counter_ns()
            _call(reader, writer, call_id, MULTIPLY_METHOD, request)
            elapsed_ms = (time.perf_counter_ns() - start) / 1_000_000
            write_rtt_value(results_path, elapsed_ms)