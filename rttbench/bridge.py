"""One-lane bridge simulations: cars from two gates share a single-lane crossing.

Only one car is on the bridge at a time. A car that enters on one side leaves
on the other, and the gate that receives it frees the bridge for the next car.
Two variants are provided. One passes cars through queues. The other passes
them through shared single-slot buffers guarded by a condition variable.
"""

from __future__ import annotations

import argparse
import math
import queue
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

LEFT = "esquerda"
RIGHT = "direita"
SIDES = (LEFT, RIGHT)

_OPPOSITE = {LEFT: RIGHT, RIGHT: LEFT}
_EXIT_MESSAGES = {LEFT: "saiu no lado esquerdo", RIGHT: "saiu no lado direito"}

DEFAULT_RUNS = 1000
DEFAULT_CARS = 1000
DEMO_LEFT_CARS = 5
DEMO_RIGHT_CARS = 3
DEMO_CROSSING_TIME = {"channel": 2.0, "buffer": 1.0}


@dataclass(frozen=True)
class Car:
    """A car identified by its plate."""

    plate: str

    def __str__(self) -> str:
        return "{" + self.plate + "}"


EventHandler = Callable[[str, Car], None]
Arrivals = tuple[list[Car], list[Car]]


def make_cars(prefix: str, count: int) -> list[Car]:
    """Return ``count`` cars with plates ``prefix0``, ``prefix1`` and so on."""
    if count < 0:
        raise ValueError("count must not be negative")
    return [Car(f"{prefix}{index}") for index in range(count)]


def _emitter(on_event: EventHandler | None) -> EventHandler:
    """Return a callable that forwards events to ``on_event`` when one is given."""

    def emit(message: str, car: Car) -> None:
        if on_event is not None:
            on_event(message, car)

    return emit


def _check_crossing_time(crossing_time: float) -> None:
    if crossing_time < 0 or math.isnan(crossing_time):
        raise ValueError("crossing_time must not be negative")


def _cross(crossing_time: float) -> None:
    if crossing_time:
        time.sleep(crossing_time)


def _run_all(*workers: Callable[[], None]) -> None:
    threads = [threading.Thread(target=worker, daemon=True) for worker in workers]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def channel_bridge(
    left: Sequence[Car],
    right: Sequence[Car],
    crossing_time: float = 0.0,
    on_event: EventHandler | None = None,
) -> Arrivals:
    """Send every car across the bridge through queues.

    ``on_event`` receives a message and the car it concerns whenever a car
    enters the bridge or leaves at a gate. Returns the cars that arrived at
    the left gate and at the right gate, in arrival order.
    """
    _check_crossing_time(crossing_time)
    emit = _emitter(on_event)
    outgoing = {LEFT: list(left), RIGHT: list(right)}
    total = len(outgoing[LEFT]) + len(outgoing[RIGHT])

    entrance: queue.Queue[tuple[str, Car]] = queue.Queue(maxsize=1)
    exits: dict[str, queue.Queue[Car]] = {side: queue.Queue(maxsize=1) for side in SIDES}
    arrivals: dict[str, list[Car]] = {side: [] for side in SIDES}
    bridge_free = threading.Lock()

    def sender(side: str) -> Callable[[], None]:
        def run() -> None:
            for car in outgoing[side]:
                entrance.put((side, car))

        return run

    def receiver(side: str) -> Callable[[], None]:
        def run() -> None:
            for _ in outgoing[_OPPOSITE[side]]:
                car = exits[side].get()
                arrivals[side].append(car)
                emit(_EXIT_MESSAGES[side], car)
                bridge_free.release()

        return run

    def bridge() -> None:
        for _ in range(total):
            bridge_free.acquire()
            side, car = entrance.get()
            emit(f"entrou na ponte pela {side}", car)
            _cross(crossing_time)
            exits[_OPPOSITE[side]].put(car)

    _run_all(
        sender(LEFT), receiver(LEFT), sender(RIGHT), receiver(RIGHT), bridge
    )
    return arrivals[LEFT], arrivals[RIGHT]


@dataclass
class _Buffers:
    on_bridge: Car | None = None
    direction: str = ""
    exits: dict[str, Car | None] = field(
        default_factory=lambda: {side: None for side in SIDES}
    )


def buffer_bridge(
    left: Sequence[Car],
    right: Sequence[Car],
    crossing_time: float = 0.0,
    on_event: EventHandler | None = None,
) -> Arrivals:
    """Send every car across the bridge through shared single-slot buffers.

    ``on_event`` receives a message and the car it concerns when a car enters
    the bridge, when it leaves the bridge and when it reaches the far gate.
    Returns the cars that arrived at the left gate and at the right gate.
    """
    _check_crossing_time(crossing_time)
    emit = _emitter(on_event)
    outgoing = {LEFT: list(left), RIGHT: list(right)}
    total = len(outgoing[LEFT]) + len(outgoing[RIGHT])

    buffers = _Buffers()
    changed = threading.Condition()
    bridge_free = threading.Lock()
    arrivals: dict[str, list[Car]] = {side: [] for side in SIDES}

    def sender(side: str) -> Callable[[], None]:
        def run() -> None:
            for car in outgoing[side]:
                bridge_free.acquire()
                with changed:
                    buffers.direction = side
                    buffers.on_bridge = car
                    changed.notify_all()

        return run

    def receiver(side: str) -> Callable[[], None]:
        def run() -> None:
            for _ in outgoing[_OPPOSITE[side]]:
                with changed:
                    changed.wait_for(lambda: buffers.exits[side] is not None)
                    car = buffers.exits[side]
                    buffers.exits[side] = None
                    changed.notify_all()
                assert car is not None
                arrivals[side].append(car)
                emit(_EXIT_MESSAGES[side], car)
                bridge_free.release()

        return run

    def bridge() -> None:
        for _ in range(total):
            with changed:
                changed.wait_for(lambda: buffers.on_bridge is not None)
                car, direction = buffers.on_bridge, buffers.direction
                buffers.on_bridge = None
            assert car is not None
            emit(f"entrou na ponte pela {direction}", car)
            _cross(crossing_time)
            destination = _OPPOSITE[direction]
            emit(f"saindo da ponte pela {destination}", car)
            with changed:
                changed.wait_for(lambda: buffers.exits[destination] is None)
                buffers.exits[destination] = car
                changed.notify_all()

    _run_all(
        sender(LEFT), receiver(LEFT), sender(RIGHT), receiver(RIGHT), bridge
    )
    return arrivals[LEFT], arrivals[RIGHT]


def time_runs(func: Callable[[], object], runs: int) -> list[float]:
    """Call ``func`` ``runs`` times and return each duration in whole milliseconds."""
    if runs < 0:
        raise ValueError("runs must not be negative")
    durations: list[float] = []
    for _ in range(runs):
        start = time.perf_counter_ns()
        func()
        durations.append(float((time.perf_counter_ns() - start) // 1_000_000))
    return durations


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def _report(title: str, durations: Sequence[float]) -> None:
    # Imported here so the simulations stay usable without the statistics module.
    from rttbench.stats import average, median, variance

    mean = average(durations)
    print(title)
    print("====================================")
    print("Média:     ", _format_number(mean), "ms")
    print("Variancia:", _format_number(variance(durations, mean)), "ms")
    print("Mediana:   ", _format_number(median(durations)), "ms")


def _positive(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return value


def _non_negative_float(text: str) -> float:
    value = float(text)
    if value < 0 or math.isnan(value):
        raise argparse.ArgumentTypeError("must not be negative")
    return value


def _print_event(message: str, car: Car) -> None:
    print(message, car)


def main(argv: Sequence[str] | None = None) -> int:
    """Run a narrated bridge demo or benchmark both bridge variants."""
    parser = argparse.ArgumentParser(
        prog="rttbench-bridge",
        description="Simulate cars crossing a one-lane bridge.",
    )
    parser.add_argument(
        "--demo",
        choices=sorted(DEMO_CROSSING_TIME),
        help="narrate a single run of one variant instead of benchmarking",
    )
    parser.add_argument("--runs", type=_positive, default=DEFAULT_RUNS)
    parser.add_argument("--cars", type=_non_negative, default=None)
    parser.add_argument("--crossing-time", type=_non_negative_float, default=None)
    args = parser.parse_args(argv)

    if args.demo:
        left_count = DEMO_LEFT_CARS if args.cars is None else args.cars
        right_count = DEMO_RIGHT_CARS if args.cars is None else args.cars
        crossing = (
            DEMO_CROSSING_TIME[args.demo]
            if args.crossing_time is None
            else args.crossing_time
        )
        simulate = channel_bridge if args.demo == "channel" else buffer_bridge
        simulate(
            make_cars("AAA", left_count),
            make_cars("BBB", right_count),
            crossing,
            _print_event,
        )
        return 0

    count = DEFAULT_CARS if args.cars is None else args.cars
    crossing = 0.0 if args.crossing_time is None else args.crossing_time

    def runner(simulate: Callable[..., Arrivals]) -> Callable[[], Arrivals]:
        return lambda: simulate(make_cars("AAA", count), make_cars("BBB", count), crossing)

    _report("Exercício 1", time_runs(runner(channel_bridge), args.runs))
    print()
    _report("Exercício 2", time_runs(runner(buffer_bridge), args.runs))
    return 0