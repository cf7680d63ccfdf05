# rttbench

Measure how long a remote matrix multiplication takes to come back.

A client sends two random square integer matrices to a server. The server
multiplies them and replies, and the client records the round-trip time of
each call in milliseconds. The same workload runs over four transports:

- plain TCP with newline-delimited JSON
- UDP with length-prefixed datagrams
- a JSON RPC channel over TCP
- an MQTT broker

A summary reports the mean, the median and the spread of the recorded times.

The package also ships a small concurrency exercise. Cars arriving from both
ends share a one-lane bridge. It is solved once with queues and once with
single-slot hand-off buffers, and a timing harness compares the two.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The `rttbench` command

```
rttbench <protocol> <operation> [--host HOST] [--port PORT]
         [--invocations N] [--results-file PATH]
```

| protocol | operations                    |
|----------|-------------------------------|
| `tcp`    | `server`, `client`            |
| `udp`    | `server`, `client`            |
| `go-rpc` | `server`, `client`, `results` |
| `mqtt`   | `server`, `client`, `results` |

If the protocol or operation is missing or unknown, the command prints a usage
line and exits with status 1.

Start a server in one terminal and a client in another:

```
rttbench tcp server
rttbench tcp client
```

- **tcp / udp.** The server listens on `localhost:8080` by default. The client
  sends `--invocations` requests (10000 by default). Each request carries
  fresh random 60×60 matrices with entries below 100. When the run ends, the
  client prints the average, median and variance of the round trips.
- **go-rpc.** `server` listens on `0.0.0.0:8080`. `client` connects to
  `rpc-server:8080` by default and calls `Matrix.Multiply` with one pair of
  random 20×20 matrices, over and over. It appends every round-trip time to a
  results file, `/data/go-rpc-results.txt` by default. `results` reads a file
  and prints the mean, standard deviation and median. It reads
  `shared-volume/go-rpc-results.txt` unless `--results-file` says otherwise.
- **mqtt.** Both `server` and `client` connect to a broker at `mqtt:3883` by
  default. Use `--host` and `--port` to point them elsewhere. The client
  appends its times to `/app/data/mqtt-results.txt`, and `results` reads the
  same file by default.

`--host` and `--port` override the listening or connecting address.
`--results-file` overrides the file that clients write and that `results`
reads.

## The `rttbench-bridge` command

```
rttbench-bridge [--demo {buffer,channel}] [--runs N] [--cars N] [--crossing-time SECONDS]
```

Without `--demo`, the command times both bridge variants, `--runs` times each
(1000 by default). Every run sends `--cars` cars from each side (1000 by
default) with no crossing delay. For each variant it prints the mean,
variance and median run time in milliseconds.

`--demo channel` or `--demo buffer` instead narrates a single run. The run
uses 5 cars from the left and 3 from the right unless `--cars` is given. The
crossing takes 2 s (channel) or 1 s (buffer) unless `--crossing-time` is given.
Each car is printed as it enters the bridge and as it reaches the far gate.

## Library use

```python
from rttbench.matrix import multiply, multiply32
from rttbench.randgen import random_matrices, random_string
from rttbench.stats import summarize, median, format_stats

a, b = random_matrices(20, 100)
product = multiply(a, b)

times = [1.2, 0.9, 1.5, 1.1]
print(summarize(times))      # Summary(average=..., variance=..., standard_deviation=..., median=...)
print(median(times))
print(format_stats(times))
```

- **`multiply`** raises `ValueError` when a matrix is empty or the inner
  dimensions do not agree.
- **`multiply32`** wraps every result to a signed 32-bit integer.
- **`average`** returns 0 for an empty sequence.
- **`variance`** returns NaN for an empty sequence. It computes the population
  variance.
- **`median`** raises `ValueError` for an empty sequence.
- **`random_string(length)`** returns a hex string built from `length // 2`
  random bytes.

### Messages

Requests and replies are data classes that convert to and from JSON:

```python
from rttbench.messages import Request, Reply, handle_request

request = Request(operation="Mul", a=[[1, 2], [3, 4]], b=[[5, 6], [7, 8]])
reply = handle_request(Request.from_json(request.to_json()))
print(Reply.from_json(reply.to_json()).r)   # [[19, 22], [43, 50]]
```

`from_dict` and `from_json` match keys without regard to case, and missing
fields take their defaults. `handle_request` accepts only the `Mul` operation
and raises `ValueError` for any other.

### Transports

- **`rttbench.udp`.** Each datagram is a frame: the payload length as five
  decimal digits, the JSON payload, and a `0xFF` end byte. `encode_frame` and
  `decode_frame` build and read frames. Both raise `ValueError` for payloads
  over 99999 bytes and for malformed frames. `send_message`,
  `receive_message`, `handle_requests`, `serve` and `run_client` build on
  them.
- **`rttbench.tcp`.** Provides `handle_connection`, `serve` and `run_client`.
  `run_client` returns a `Summary`, as does the UDP one.
- **`rttbench.rpc`.** Provides `MatrixService`, `serve` and `run_client`. The
  service multiplies without checking the operation field.
- **`rttbench.mqtt`.** Requests go out on `matrix/request` and replies come
  back on `matrix/response`. Each reply is tagged with the requesting client's
  random id. `on_request` turns one request payload into a reply payload. It
  returns `None` for undecodable input, and the reply carries no result
  matrix when the matrices cannot be multiplied. `run_client` raises
  `TimeoutError` when no reply arrives within 10 seconds.

### Results files

`rttbench.results.write_rtt_value` appends one value per line.
`read_rtt_values` reads the values back and raises `ValueError` on a line
that is not a number.

### Bridge simulation

`rttbench.bridge` provides the simulation as a library:

- `make_cars(prefix, count)` builds a list of cars.
- `channel_bridge(left, right, crossing_time, on_event)` runs the queue
  variant.
- `buffer_bridge(left, right, crossing_time, on_event)` runs the buffer
  variant.
- `time_runs(func, runs)` calls a function repeatedly and records each
  duration in milliseconds.

Both bridge functions return the lists of cars that arrived at the left and
right gates.

## What is not included

- There is no gRPC transport. Remote calls go only through the JSON RPC
  channel described above.
- No MQTT broker is included. The `mqtt` server and client need one running
  at the configured address.