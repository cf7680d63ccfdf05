"""Command line entry point for the round-trip time benchmarks."""

from __future__ import annotations

import argparse
import math
from collections.abc import Callable, Sequence
from typing import Any

from rttbench import mqtt as mqtt_transport
from rttbench import rpc, tcp, udp
from rttbench.randgen import random_matrices
from rttbench.results import read_rtt_values
from rttbench.stats import Summary, format_stats

DIM = 20
MAX_VALUE = 100
INVOCATIONS = 10000
SOCKET_MATRIX_SIZE = 60

RPC_RESULTS_PATH = "shared-volume/go-rpc-results.txt"
MQTT_RESULTS_PATH = "/app/data/mqtt-results.txt"

OPERATIONS: dict[str, tuple[str, ...]] = {
    "tcp": ("server", "client"),
    "udp": ("server", "client"),
    "go-rpc": ("server", "client", "results"),
    "mqtt": ("server", "client", "results"),
}

USAGE = "Usage: rttbench [{}] [server|client|results]".format("|".join(OPERATIONS))


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def _print_summary(summary: Summary) -> None:
    print("Average RTT time:", _format_number(summary.average), "ms")
    print("Median RTT time:", _format_number(summary.median), "ms")
    print("Variance RTT time:", _format_number(summary.variance), "ms")


def _print_results(path: str) -> None:
    try:
        values = read_rtt_values(path)
    except (OSError, ValueError):
        print("Error reading RTT values")
        raise
    print(format_stats(values))


def _endpoint(args: argparse.Namespace, host_key: str, port_key: str) -> dict[str, Any]:
    endpoint: dict[str, Any] = {}
    if args.host is not None:
        endpoint[host_key] = args.host
    if args.port is not None:
        endpoint[port_key] = args.port
    return endpoint


def _socket_handlers(module: Any) -> dict[str, Callable[[argparse.Namespace], None]]:
    return {
        "server": lambda args: module.serve(**_endpoint(args, "host", "port")),
        "client": lambda args: _print_summary(
            module.run_client(
                args.invocations,
                SOCKET_MATRIX_SIZE,
                MAX_VALUE,
                **_endpoint(args, "host", "port"),
            )
        ),
    }


def _rpc_client(args: argparse.Namespace) -> None:
    a, b = random_matrices(DIM, MAX_VALUE)
    options: dict[str, Any] = {}
    if args.host is not None or args.port is not None:
        host, port = rpc.DEFAULT_ADDRESS.rsplit(":", 1)
        options["address"] = f"{args.host or host}:{args.port or port}"
    if args.results_file is not None:
        options["results_path"] = args.results_file
    rpc.run_client(args.invocations, a, b, **options)


def _mqtt_client(args: argparse.Namespace) -> None:
    a, b = random_matrices(DIM, MAX_VALUE)
    options = _endpoint(args, "broker_host", "broker_port")
    if args.results_file is not None:
        options["results_path"] = args.results_file
    mqtt_transport.run_client(args.invocations, a, b, **options)


_HANDLERS: dict[str, dict[str, Callable[[argparse.Namespace], None]]] = {
    "tcp": _socket_handlers(tcp),
    "udp": _socket_handlers(udp),
    "go-rpc": {
        "server": lambda args: rpc.serve(**_endpoint(args, "host", "port")),
        "client": _rpc_client,
        "results": lambda args: _print_results(args.results_file or RPC_RESULTS_PATH),
    },
    "mqtt": {
        "server": lambda args: mqtt_transport.serve(
            **_endpoint(args, "broker_host", "broker_port")
        ),
        "client": _mqtt_client,
        "results": lambda args: _print_results(args.results_file or MQTT_RESULTS_PATH),
    },
}


def _positive(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Run a benchmark server, client or results report; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="rttbench",
        description="Measure round-trip times of remote matrix multiplication.",
    )
    parser.add_argument("protocol", nargs="?")
    parser.add_argument("operation", nargs="?")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=_positive, default=None)
    parser.add_argument("--invocations", type=_positive, default=INVOCATIONS)
    parser.add_argument("--results-file", default=None)
    args = parser.parse_args(argv)

    handler = _HANDLERS.get(args.protocol or "", {}).get(args.operation or "")
    if handler is None:
        print(USAGE)
        return 1
    handler(args)
    return 0