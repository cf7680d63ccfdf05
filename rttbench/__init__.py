"""Round-trip-time benchmarks for remote matrix multiplication over TCP, UDP, JSON RPC and MQTT, with a one-lane bridge simulation."""

__version__ = "0.1.0"