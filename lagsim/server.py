"""The authoritative game server."""

from __future__ import annotations

from lagsim.client import Client
from lagsim.netcode import (
    Clock,
    Entity,
    LagNetwork,
    MovementInput,
    WorldStateEntry,
    WorldStateMessage,
    get_time,
)

CLIENT_UPDATE_INTERVAL = 0.02
SERVER_UPDATE_INTERVAL = 0.1


class Server:
    """Holds the true world state and talks to clients over lagged networks."""

    def __init__(self, clock: Clock = get_time) -> None:
        self.clock = clock
        self.clients: list[Client] = []
        self.network = LagNetwork(clock=clock)
        self.time_since_last_update = 0.0
        self.update_interval = SERVER_UPDATE_INTERVAL
        self.entities: dict[int, Entity] = {}
        self.last_processed_inputs: dict[int, float] = {}

    def add_client(self) -> Client:
        """Create a client, register it and give it an entity."""
        client = Client(self, CLIENT_UPDATE_INTERVAL, clock=self.clock)
        self.clients.append(client)
        entity_id = len(self.clients)
        print(f"Creating entity for client: with entity id: {entity_id}")
        self.entities[entity_id] = Entity(entity_id)
        return client

    def list_clients(self) -> int:
        """Print how many clients are connected and return that count."""
        count = len(self.clients)
        print(f"Server has {count} clients.")
        return count

    def process_inputs(self) -> None:
        """Apply every movement input that has arrived."""
        while (message := self.network.receive()) is not None:
            if not isinstance(message, MovementInput):
                continue
            entity = self.entities.get(message.entity_id)
            if entity is not None:
                self.last_processed_inputs[message.entity_id] = float(
                    message.input_sequence_number
                )
                entity.apply_input(message)

    def send_world_state(self) -> None:
        """Send a snapshot of all entities to every client."""
        message = WorldStateMessage(
            tuple(
                WorldStateEntry(
                    entity_id=entity_id,
                    position=entity.x,
                    last_processed_input=self.last_processed_inputs.get(entity_id, 0.0),
                )
                for entity_id, entity in self.entities.items()
            )
        )
        for client in self.clients:
            client.network.send(client.latency_to_server, message)

    def update(self, delta_time: float) -> None:
        """Tick every client, then run a server tick when its interval is due."""
        self.time_since_last_update += delta_time

        for client in self.clients:
            message = client.update(delta_time, self.update_interval)
            if message is not None:
                self.network.send(client.latency_to_server, message)

        self.time_since_last_update += delta_time

        if self.time_since_last_update >= self.update_interval:
            self.time_since_last_update -= self.update_interval
            self.process_inputs()
            self.send_world_state()