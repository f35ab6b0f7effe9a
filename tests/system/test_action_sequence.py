import pytest

from simwrap.api.actions import AgentAction
from simwrap.api.errors import (
    InvalidActionError,
    SimulationInitError,
    UnexpectedStatusError,
)
from simwrap.api.workflow import execute_action_array, init_simulation, simulate_agent_action


@pytest.mark.system
def test_sequence_moves_agent_and_collects_item(sim_api):
    sim = init_simulation(sim_api, "HW1")
    assert sim.agent_status["position"] == [0, 0]

    # HW1: 5x5 grid, item at (2, 2), agent starts at (0, 0) facing N
    actions = [
        AgentAction.MOVE_FORWARD,
        AgentAction.MOVE_FORWARD,
        AgentAction.TURN_RIGHT,
        AgentAction.MOVE_FORWARD,
        AgentAction.MOVE_FORWARD,
        AgentAction.PICK_UP,
    ]
    statuses = execute_action_array(sim_api, sim.simulation_id, sim.last_agent, actions, "manual")

    assert [s["step"] for s in statuses] == [1, 2, 3, 4, 5, 6]
    assert statuses[2]["heading"] == "E"
    assert statuses[-1]["position"] == [2, 2]
    assert statuses[-1]["holding"] is True
    assert statuses[-1]["lastAction"] == "pickUp"
    assert statuses[-1]["mode"] == "manual"


@pytest.mark.system
def test_walls_block_movement(sim_api):
    sim = init_simulation(sim_api, "HW1")

    status = execute_action_array(
        sim_api, sim.simulation_id, 0, [AgentAction.TURN_LEFT, AgentAction.MOVE_FORWARD], 1
    )[-1]

    assert status["heading"] == "W"
    assert status["position"] == [0, 0]


@pytest.mark.system
def test_cycle_on_unstarted_simulation_stops_at_action(sim_api):
    created = sim_api.create_simulation("HW1")

    with pytest.raises(InvalidActionError) as exc:
        simulate_agent_action(sim_api, created["simulationId"], 0, "idle", 1)
    assert exc.value.stage == "action"


@pytest.mark.system
def test_sequence_stops_on_unknown_agent(sim_api):
    sim = init_simulation(sim_api, "HW2")

    with pytest.raises(UnexpectedStatusError) as exc:
        execute_action_array(sim_api, sim.simulation_id, 5, ["idle", "idle"], 1)
    assert exc.value.status_code == 404
    assert exc.value.action_index == 0

    # nothing was stepped
    assert sim_api.get_agent_status(sim.simulation_id, 0)["step"] == 0


@pytest.mark.system
def test_service_answers_415_without_json(sim_service):
    from fastapi.testclient import TestClient

    http = TestClient(sim_service, base_url="https://testserver/api/")
    http.post("simulations/create", json={"env_name": "HW1"})
    http.put("simulations/1/start")
    resp = http.post("simulations/1/agents/0/action", content=b"action=idle")
    assert resp.status_code == 415


@pytest.mark.system
def test_start_twice_is_rejected(sim_api):
    sim = init_simulation(sim_api, "HW1")
    with pytest.raises(UnexpectedStatusError) as exc:
        sim_api.start_simulation(sim.simulation_id)
    assert exc.value.status_code == 409


@pytest.mark.system
def test_init_unknown_environment(sim_api):
    with pytest.raises(SimulationInitError) as exc:
        init_simulation(sim_api, "HW9")
    assert exc.value.stage == "create"
    assert exc.value.cause.status_code == 400
