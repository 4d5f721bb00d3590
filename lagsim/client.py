"""A game client with prediction, reconciliation and interpolation."""

from __future__ import annotations

import math
import weakref
from typing import TYPE_CHECKING

from lagsim.netcode import (
    Clock,
    Entity,
    LagNetwork,
    Message,
    MovementInput,
    WorldStateMessage,
    clock_ms,
    get_time,
)

if TYPE_CHECKING:
    from lagsim.server import Server


class Client:
    """One player's view of the shared world."""

    def __init__(
        self,
        server: Server,
        update_interval: float,
        clock: Clock | None = None,
    ) -> None:
        self._server_ref = weakref.ref(server)
        self.clock: Clock = clock if clock is not None else getattr(server, "clock", get_time)
        self.update_interval = update_interval
        self.time_since_last_update = 0.0
        self.key_left = False
        self.key_right = False
        self.last_time = self.clock()
        self.input_sequence_number = 0
        self.entity_id = len(server.clients) + 1
        self.network = LagNetwork(clock=self.clock)
        self.entities: dict[int, Entity] = {}
        self.client_side_prediction = False
        self.server_reconciliation = False
        self.pending_inputs: list[MovementInput] = []
        self.latency_to_server = 250.0
        self.entity_interpolation = False

    @property
    def server(self) -> Server | None:
        """The server this client belongs to, if it still exists."""
        return self._server_ref()

    def process_input(self) -> MovementInput | None:
        """Turn the current key state into a movement input, if a key is held."""
        seconds = self.clock()
        delta_seconds = (seconds - self.last_time) / 1000.0
        self.last_time = seconds

        if self.key_left:
            delta_seconds = -delta_seconds
        elif not self.key_right:
            return None

        movement = MovementInput(
            press_time=delta_seconds,
            entity_id=self.entity_id,
            input_sequence_number=self.input_sequence_number,
        )
        self.input_sequence_number += 1

        if self.client_side_prediction:
            own = self.entities.get(self.entity_id)
            if own is not None:
                own.apply_input(movement)

        self.pending_inputs.append(movement)
        return movement

    def process_server_messages(self) -> None:
        """Apply every world state that has arrived from the server."""
        while (message := self.network.receive()) is not None:
            if isinstance(message, WorldStateMessage):
                self._apply_world_state(message)

    def _apply_world_state(self, message: WorldStateMessage) -> None:
        for state in message.world_state:
            entity = self.entities.setdefault(state.entity_id, Entity(state.entity_id))

            if state.entity_id == self.entity_id:
                entity.x = state.position
                if self.server_reconciliation:
                    still_pending = []
                    for pending in self.pending_inputs:
                        if pending.input_sequence_number > state.last_processed_input:
                            entity.apply_input(pending)
                            still_pending.append(pending)
                    self.pending_inputs = still_pending
                else:
                    self.pending_inputs.clear()
            elif self.entity_interpolation:
                entity.position_buffer.append((clock_ms(self.clock), state.position))
            else:
                entity.x = state.position

    def interpolate_entities(self, server_update_interval: float) -> None:
        """Place other entities between the two snapshots around render time."""
        render_timestamp = clock_ms(self.clock) - int(math.floor(1000.0 * server_update_interval))

        for entity_id, entity in self.entities.items():
            if entity_id == self.entity_id:
                continue

            buffer = list(entity.position_buffer)
            while len(buffer) >= 2 and buffer[1][0] <= render_timestamp:
                buffer.pop(0)

            if len(buffer) >= 2 and buffer[0][0] <= render_timestamp <= buffer[1][0]:
                (t0, x0), (t1, x1) = buffer[0], buffer[1]
                fraction = (render_timestamp - t0) / (t1 - t0)
                entity.x = x0 + fraction * (x1 - x0)
            elif len(buffer) == 1 and buffer[0][0] <= render_timestamp:
                entity.x = buffer[0][1]

    def update(self, delta_time: float, server_update_interval: float) -> Message | None:
        """Advance the client clock; on each tick return the input to send, if any."""
        self.time_since_last_update += delta_time
        if self.time_since_last_update < self.update_interval:
            return None

        self.time_since_last_update -= self.update_interval
        self.process_server_messages()
        if self.entity_interpolation:
            self.interpolate_entities(server_update_interval)
        return self.process_input()