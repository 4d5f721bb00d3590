# lagsim

A small interactive demonstration of the techniques multiplayer games use to
hide network latency:

- **client-side prediction**: a client applies its own input immediately
  instead of waiting for the server;
- **server reconciliation**: when an authoritative state arrives, the client
  drops the inputs the server has acknowledged and replays the rest;
- **entity interpolation**: other players are drawn between the two most
  recent authoritative positions, one server tick in the past.

One authoritative server and two clients run in the same window. Every message
between them passes through a simulated network, `LagNetwork`. It holds each
message back for the sending client's configured latency.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

```
lagsim
```

The window has three bands:

- **Server band (top).** It shows the server's view and the last input
  sequence number the server has processed for each player.
- **Client bands (two lower ones).** Each shows what one client sees, and how
  many of that client's inputs the server has not yet acknowledged.

Player 1 moves with the **Left** and **Right** arrow keys. Player 2 moves with
**A** and **D**.

A settings panel on the right has the following controls for each client:

- toggle buttons that switch prediction, reconciliation and interpolation on
  and off;
- a slider that sets the client's latency to the server, in milliseconds,
  from 5 to 5000.

Every client starts with all three techniques switched off and a latency of
250 ms. That lets you watch how much each technique improves things as you
turn it on.

`lagsim --frames N` closes the window by itself after `N` frames. The default
of 0 keeps it running until the window is closed.

## Using the simulation from code

The simulation does not depend on the display:

```python
from lagsim.server import Server

server = Server()
client = server.add_client()
client.client_side_prediction = True
client.server_reconciliation = True
client.key_right = True

server.update(0.016)  # advance by one frame
```

By default all timing comes from a monotonic clock. For deterministic runs,
such as tests, pass your own clock to `Server(clock=...)`. It must be a
callable that returns seconds. The server shares it with its clients and their
networks.

`lagsim.netcode` holds the shared pieces:

- `Entity`
- `MovementInput`
- `WorldStateEntry`
- `WorldStateMessage`
- the delaying `LagNetwork`

`lagsim.client.Client` and `lagsim.server.Server` hold the client and server
logic. `lagsim.app` holds the window, the `SettingsPanel` and the drawing
functions.

## What it does not do

Nothing goes over a real network. The server and its clients live in one
process, and latency is only simulated. There is no way to run a server on its
own or to connect clients from other machines.