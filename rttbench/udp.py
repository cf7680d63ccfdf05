"""Matrix multiplication over UDP with length-prefixed datagrams.

Each datagram holds a five-digit, zero-padded payload length, the JSON
payload itself and a closing ``0xFF`` byte.
"""

from __future__ import annotations

import socket
import time

from rttbench.messages import OPERATION, Reply, Request, handle_request
from rttbench.randgen import random_matrices
from rttbench.stats import Summary, summarize

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
BUFFER_SIZE = 64000
HEADER_SIZE = 5
END_BYTE = b"\xff"
MAX_PAYLOAD = 10**HEADER_SIZE - 1

Address = tuple[str, int]


def encode_frame(payload: bytes) -> bytes:
    """Wrap ``payload`` in a length header and the end byte."""
    if len(payload) > MAX_PAYLOAD:
        raise ValueError(
            f"payload of {len(payload)} bytes does not fit a {HEADER_SIZE}-digit header"
        )
    return f"{len(payload):0{HEADER_SIZE}d}".encode("ascii") + bytes(payload) + END_BYTE


def decode_frame(data: bytes) -> bytes:
    """Return the payload carried by a datagram.

    Raises ValueError when the header is not a number or the datagram is short.
    """
    data = bytes(data)
    header = data[:HEADER_SIZE]
    if len(header) < HEADER_SIZE or not header.isdigit():
        raise ValueError(f"invalid length header {header!r}")
    end = HEADER_SIZE + int(header)
    if len(data) < end:
        raise ValueError(
            f"truncated frame: header announces {end - HEADER_SIZE} bytes, "
            f"got {len(data) - HEADER_SIZE}"
        )
    return data[HEADER_SIZE:end]


def send_message(
    sock: socket.socket, payload: bytes, addr: Address | None = None
) -> None:
    """Send one framed payload, to ``addr`` or to the connected peer."""
    frame = encode_frame(payload)
    if addr is None:
        sock.send(frame)
    else:
        sock.sendto(frame, addr)


def receive_message(sock: socket.socket) -> tuple[bytes, Address]:
    """Receive one datagram and return its payload with the sender's address."""
    data, addr = sock.recvfrom(BUFFER_SIZE)
    return decode_frame(data), addr


def handle_requests(sock: socket.socket) -> None:
    """Answer multiplication requests until the socket fails or times out.

    The socket is closed on return. A malformed request raises ValueError.
    """
    with sock:
        while True:
            try:
                payload, addr = receive_message(sock)
            except OSError:
                return
            reply = handle_request(Request.from_json(payload))
            send_message(sock, reply.to_json().encode("utf-8"), addr)


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Bind a UDP socket and answer requests on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    bound_host, bound_port = sock.getsockname()[:2]
    print("Server listening on", f"{bound_host}:{bound_port}")
    handle_requests(sock)


def run_client(
    invocations: int,
    matrix_size: int,
    max_value: int,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Summary:
    """Send ``invocations`` random requests and summarise their round-trip times in ms."""
    rtts: list[float] = []
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.connect((host, port))
        for _ in range(invocations):
            a, b = random_matrices(matrix_size, max_value)
            request = Request(OPERATION, a, b)
            start = time.perf_counter()
            send_message(sock, request.to_json().encode("utf-8"))
            payload, _ = receive_message(sock)
            Reply.from_json(payload)
            rtts.append((time.perf_counter() - start) * 1000)
    return summarize(rtts)