"""Matrix multiplication through an MQTT broker.

Clients publish requests on ``matrix/request`` and the server publishes the
results on ``matrix/response``, tagged with the id of the requesting client so
that each client picks out its own replies.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

import paho.mqtt.client as paho_mqtt

from rttbench.matrix import multiply
from rttbench.messages import Reply, Request
from rttbench.randgen import random_string
from rttbench.results import write_rtt_value

REQUEST_TOPIC = "matrix/request"
RESPONSE_TOPIC = "matrix/response"
QOS = 1
OPERATION = "mul"
SERVER_CLIENT_ID = "server"
DEFAULT_BROKER_HOST = "mqtt"
DEFAULT_BROKER_PORT = 3883
DEFAULT_RESULTS_PATH = "/app/data/mqtt-results.txt"
CLIENT_ID_LENGTH = 16
REPLY_TIMEOUT = 10.0

log = logging.getLogger(__name__)


def on_request(payload: bytes) -> bytes | None:
    """Answer one request payload with a reply payload.

    Returns None when the payload cannot be decoded. When the matrices cannot
    be multiplied the reply carries no result matrix.
    """
    try:
        request = Request.from_json(payload)
    except ValueError as exc:
        log.warning("Erro ao decodificar JSON: %s", exc)
        return None
    try:
        result = multiply(request.a, request.b)
    except ValueError:
        result = None
    return Reply(r=result, client_id=request.client_id).to_json().encode("utf-8")


def _new_client(client_id: str) -> paho_mqtt.Client:
    api_version = getattr(paho_mqtt, "CallbackAPIVersion", None)
    if api_version is None:
        return paho_mqtt.Client(client_id=client_id)
    return paho_mqtt.Client(api_version.VERSION2, client_id=client_id)


def serve(
    broker_host: str = DEFAULT_BROKER_HOST, broker_port: int = DEFAULT_BROKER_PORT
) -> None:
    """Answer multiplication requests arriving through the broker, forever."""
    client = _new_client(SERVER_CLIENT_ID)

    def handle_connect(mqtt_client: paho_mqtt.Client, *_: Any) -> None:
        mqtt_client.subscribe(REQUEST_TOPIC, qos=QOS)

    def handle_message(mqtt_client: paho_mqtt.Client, _userdata: Any, message: Any) -> None:
        reply = on_request(message.payload)
        if reply is not None:
            mqtt_client.publish(RESPONSE_TOPIC, reply, qos=QOS)

    client.on_connect = handle_connect
    client.on_message = handle_message
    client.connect(broker_host, broker_port)
    print("Servidor MQTT rodando...")
    client.loop_forever()


def run_client(
    invocations: int,
    a: list[list[int]],
    b: list[list[int]],
    broker_host: str = DEFAULT_BROKER_HOST,
    broker_port: int = DEFAULT_BROKER_PORT,
    results_path: str = DEFAULT_RESULTS_PATH,
) -> None:
    """Send ``invocations`` requests and append each round-trip time in ms.

    Raises TimeoutError when the broker or the server stops answering.
    """
    if invocations < 0:
        raise ValueError("invocations must not be negative")

    client_id = random_string(CLIENT_ID_LENGTH)
    replies: queue.Queue[Reply] = queue.Queue()
    subscribed = threading.Event()
    client = _new_client(client_id)

    def handle_connect(mqtt_client: paho_mqtt.Client, *_: Any) -> None:
        mqtt_client.subscribe(RESPONSE_TOPIC, qos=QOS)

    def handle_subscribe(*_: Any) -> None:
        subscribed.set()

    def handle_message(_client: paho_mqtt.Client, _userdata: Any, message: Any) -> None:
        try:
            reply = Reply.from_json(message.payload)
        except ValueError as exc:
            log.warning("Erro ao decodificar resposta: %s", exc)
            return
        if reply.client_id == client_id:
            replies.put(reply)

    client.on_connect = handle_connect
    client.on_subscribe = handle_subscribe
    client.on_message = handle_message
    client.connect(broker_host, broker_port)
    client.loop_start()
    try:
        if not subscribed.wait(REPLY_TIMEOUT):
            raise TimeoutError("the broker did not acknowledge the subscription")
        for _ in range(invocations):
            request = Request(OPERATION, a, b, client_id)
            start = time.perf_counter_ns()
            client.publish(REQUEST_TOPIC, request.to_json().encode("utf-8"), qos=QOS)
            try:
                replies.get(timeout=REPLY_TIMEOUT)
            except queue.Empty:
                raise TimeoutError("no reply from the server") from None
            elapsed_ms = (time.perf_counter_ns() - start) / 1_000_000
            write_rtt_value(results_path, elapsed_ms)
    finally:
        client.disconnect()
        client.loop_stop()