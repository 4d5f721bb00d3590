"""Entities, messages and a simulated network that delivers messages late."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

Clock = Callable[[], float]

_START = time.monotonic()

DEFAULT_SPEED = 40000


def get_time() -> float:
    """Seconds elapsed since the package was loaded."""
    return time.monotonic() - _START


def get_time_ms() -> int:
    """Milliseconds elapsed since the package was loaded, truncated."""
    return int(get_time() * 1000.0)


def clock_ms(clock: Clock) -> int:
    """Read ``clock`` (seconds) and return truncated milliseconds."""
    return int(clock() * 1000.0)


@dataclass(frozen=True)
class MovementInput:
    """A single movement command sent from a client to the server."""

    press_time: float
    entity_id: int
    input_sequence_number: int


@dataclass
class Entity:
    """A player-controlled object moving along one axis."""

    entity_id: int
    x: float | None = None
    speed: int = DEFAULT_SPEED
    position_buffer: list[tuple[int, float]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.x is None:
            self.x = 40.0 + self.entity_id * 100.0

    def apply_input(self, movement: MovementInput) -> None:
        """Move the entity by the amount the input describes."""
        self.x += movement.press_time * self.speed


@dataclass(frozen=True)
class WorldStateEntry:
    """The authoritative state of one entity."""

    entity_id: int
    position: float
    last_processed_input: float


@dataclass(frozen=True)
class WorldStateMessage:
    """A snapshot of every entity the server knows about."""

    world_state: tuple[WorldStateEntry, ...] = ()


Message = MovementInput | WorldStateMessage


@dataclass
class NetworkMessage:
    """A message waiting in the network until its delivery time."""

    receive_time: int
    payload: Message


@dataclass
class LagNetwork:
    """A one-way channel that holds each message back for a given lag."""

    messages: list[NetworkMessage] = field(default_factory=list)
    clock: Clock = get_time

    def send(self, lag_ms: float, message: Message) -> None:
        """Queue ``message`` for delivery ``lag_ms`` milliseconds from now."""
        receive_time = clock_ms(self.clock) + max(0, int(lag_ms))
        self.messages.append(NetworkMessage(receive_time, message))

    def receive(self) -> Message | None:
        """Return the first message whose delivery time has come, if any."""
        now = clock_ms(self.clock)
        for index, pending in enumerate(self.messages):
            if now >= pending.receive_time:
                del self.messages[index]
                return pending.payload
        return None