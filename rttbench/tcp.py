"""Matrix multiplication over TCP with newline-delimited JSON messages."""

from __future__ import annotations

import socket
import threading
import time

from rttbench.messages import OPERATION, Reply, Request, handle_request
from rttbench.randgen import random_matrices
from rttbench.stats import Summary, summarize

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080


def handle_connection(conn: socket.socket) -> None:
    """Answer every request on ``conn`` until the peer closes it.

    The connection is closed on return. A malformed request raises ValueError.
    """
    with conn, conn.makefile("rb") as reader, conn.makefile("wb") as writer:
        for line in reader:
            if not line.strip():
                continue
            reply = handle_request(Request.from_json(line))
            writer.write(reply.to_json().encode("utf-8") + b"\n")
            writer.flush()


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Accept connections and serve each on its own thread."""
    with socket.create_server((host, port)) as listener:
        print(f"Server listening on port {port}")
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                print(exc)
                return
            threading.Thread(target=handle_connection, args=(conn,), daemon=True).start()


def run_client(
    invocations: int,
    matrix_size: int,
    max_value: int,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Summary:
    """Send ``invocations`` random requests and summarise their round-trip times in ms."""
    rtts: list[float] = []
    with socket.create_connection((host, port)) as conn, conn.makefile(
        "rb"
    ) as reader, conn.makefile("wb") as writer:
        for _ in range(invocations):
            a, b = random_matrices(matrix_size, max_value)
            request = Request(OPERATION, a, b)
            start = time.perf_counter()
            writer.write(request.to_json().encode("utf-8") + b"\n")
            writer.flush()
            line = reader.readline()
            if not line:
                raise ConnectionError("server closed the connection")
            Reply.from_json(line)
            rtts.append((time.perf_counter() - start) * 1000)
    return summarize(rtts)