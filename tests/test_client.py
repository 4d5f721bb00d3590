import pytest

from lagsim.netcode import Entity, MovementInput, WorldStateEntry, WorldStateMessage
from lagsim.server import Server


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(0.0)


@pytest.fixture
def server(clock):
    return Server(clock=clock)


def deliver(client, *entries):
    client.network.send(0, WorldStateMessage(tuple(entries)))
    client.process_server_messages()


def test_entity_ids_follow_join_order(server):
    first = server.add_client()
    second = server.add_client()
    assert (first.entity_id, second.entity_id) == (1, 2)
    assert first.server is server


def test_client_defaults(server):
    client = server.add_client()
    assert client.update_interval == 0.02
    assert client.latency_to_server == 250.0
    assert not client.client_side_prediction
    assert not client.server_reconciliation
    assert not client.entity_interpolation


def test_no_keys_means_no_input(server, clock):
    client = server.add_client()
    clock.now = 1.0
    assert client.process_input() is None
    assert client.input_sequence_number == 0
    assert client.pending_inputs == []


def test_key_right_and_left_are_opposite(server, clock):
    client = server.add_client()
    client.key_right = True
    clock.now = 1.0
    right = client.process_input()
    client.key_right = False
    client.key_left = True
    clock.now = 2.0
    left = client.process_input()
    assert right.press_time > 0
    assert left.press_time == pytest.approx(-right.press_time)
    assert [right.input_sequence_number, left.input_sequence_number] == [0, 1]
    assert client.pending_inputs == [right, left]
    assert right.entity_id == client.entity_id


def test_prediction_moves_own_entity(server, clock):
    client = server.add_client()
    deliver(client, WorldStateEntry(1, 10.0, 0.0))
    client.client_side_prediction = True
    client.key_right = True
    clock.now = 1.0
    movement = client.process_input()
    expected = Entity(1, x=10.0)
    expected.apply_input(movement)
    assert client.entities[1].x == pytest.approx(expected.x)


def test_without_prediction_own_entity_stays(server, clock):
    client = server.add_client()
    deliver(client, WorldStateEntry(1, 10.0, 0.0))
    client.key_right = True
    clock.now = 1.0
    client.process_input()
    assert client.entities[1].x == 10.0


def test_world_state_creates_and_positions_entities(server):
    client = server.add_client()
    deliver(client, WorldStateEntry(1, 11.0, 0.0), WorldStateEntry(2, 22.0, 0.0))
    assert set(client.entities) == {1, 2}
    assert client.entities[1].x == 11.0
    assert client.entities[2].x == 22.0


def test_without_reconciliation_pending_cleared(server):
    client = server.add_client()
    client.pending_inputs = [MovementInput(0.001, 1, 0), MovementInput(0.001, 1, 1)]
    deliver(client, WorldStateEntry(1, 5.0, 0.0))
    assert client.pending_inputs == []
    assert client.entities[1].x == 5.0


def test_reconciliation_reapplies_unacknowledged(server):
    client = server.add_client()
    client.server_reconciliation = True
    inputs = [MovementInput(0.001, 1, n) for n in range(3)]
    client.pending_inputs = list(inputs)
    deliver(client, WorldStateEntry(1, 5.0, 0.0))
    assert client.pending_inputs == inputs[1:]
    expected = Entity(1, x=5.0)
    for movement in inputs[1:]:
        expected.apply_input(movement)
    assert client.entities[1].x == pytest.approx(expected.x)


def test_interpolation_buffers_other_entities(server, clock):
    client = server.add_client()
    client.entity_interpolation = True
    clock.now = 0.5
    deliver(client, WorldStateEntry(1, 1.0, 0.0), WorldStateEntry(2, 7.0, 0.0))
    assert client.entities[2].position_buffer == [(500, 7.0)]
    assert client.entities[1].position_buffer == []
    assert client.entities[1].x == 1.0


def test_interpolate_between_snapshots(server, clock):
    client = server.add_client()
    other = Entity(2)
    other.position_buffer = [(0, 0.0), (200, 100.0)]
    client.entities[2] = other
    clock.now = 0.2
    client.interpolate_entities(0.1)
    assert other.x == pytest.approx(50.0)
    assert len(other.position_buffer) == 2


def test_interpolate_single_snapshot(server, clock):
    client = server.add_client()
    other = Entity(2)
    other.position_buffer = [(0, 33.0)]
    client.entities[2] = other
    clock.now = 1.0
    client.interpolate_entities(0.1)
    assert other.x == 33.0


def test_interpolate_skips_own_entity(server, clock):
    client = server.add_client()
    own = Entity(1, x=3.0)
    own.position_buffer = [(0, 99.0)]
    client.entities[1] = own
    clock.now = 1.0
    client.interpolate_entities(0.1)
    assert own.x == 3.0


def test_update_waits_for_interval(server, clock):
    client = server.add_client()
    client.key_right = True
    clock.now = 1.0
    assert client.update(0.01, 0.1) is None
    assert client.time_since_last_update == pytest.approx(0.01)
    message = client.update(0.015, 0.1)
    assert isinstance(message, MovementInput)
    assert client.time_since_last_update == pytest.approx(0.005)