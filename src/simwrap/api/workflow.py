from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from simwrap.api.actions import AgentAction
from simwrap.api.client import SimulationClient
from simwrap.api.errors import ResponseShapeError, SimClientError, SimulationInitError
from simwrap.utils.normalize import normalize_response

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class EstablishedSimulation:
    simulation_id: int
    agents: int
    create_response: Any
    start_response: Any
    agent_status: Any

    @property
    def last_agent(self) -> int:
        return self.agents - 1


def simulate_agent_action(
    client: SimulationClient,
    simulation_id: int,
    agent_id: int,
    action: AgentAction | str,
    mode: Any,
) -> Any:
    """
    One action cycle: submit the action, advance one step, read the agent
    status. A stage only runs once the previous one has succeeded; the first
    error is re-raised with `stage` set to where it happened.
    """
    try:
        client.perform_agent_action(simulation_id, agent_id, action, mode)
    except SimClientError as e:
        e.stage = "action"
        logger.warning("Error submitting action %s to simulation %s: %s", action, simulation_id, e)
        raise
    logger.info("Performing action %s", action)

    try:
        client.simulate_step(simulation_id)
    except SimClientError as e:
        e.stage = "step"
        logger.warning("Step simulation error for simulation %s: %s", simulation_id, e)
        raise

    try:
        status = client.get_agent_status(simulation_id, agent_id)
    except SimClientError as e:
        e.stage = "status"
        logger.warning("Error reading status of agent %s in simulation %s: %s", agent_id, simulation_id, e)
        raise
    logger.info("Performed action %s", action)
    return status


def execute_action_array(
    client: SimulationClient,
    simulation_id: int,
    agent_id: int,
    actions: Sequence[AgentAction | str],
    mode: Any,
) -> list[Any]:
    """Run the action cycle for each action in order, stopping at the first failure."""
    statuses = []
    for index, action in enumerate(actions):
        try:
            statuses.append(simulate_agent_action(client, simulation_id, agent_id, action, mode))
        except SimClientError as e:
            e.action_index = index
            logger.warning(
                "Action sequence stopped at %d/%d (%s); %d action(s) not attempted",
                index + 1, len(actions), action, len(actions) - index - 1,
            )
            raise
    return statuses


def init_simulation(client: SimulationClient, env_name: str) -> EstablishedSimulation:
    """
    Create a simulation for `env_name`, start it and read the status of its
    last agent. Any failure is raised as SimulationInitError naming the stage.
    """
    try:
        create_response = client.create_simulation(env_name)
        simulation_id, agents = _parse_create_response(create_response)
    except SimClientError as e:
        raise _init_failed("create", e) from e
    logger.info("Created simulation %s (%s): %s", simulation_id, env_name, create_response)

    try:
        start_response = client.start_simulation(simulation_id)
    except SimClientError as e:
        raise _init_failed("start", e) from e
    logger.info("Started simulation %s: %s", simulation_id, start_response)

    try:
        agent_status = client.get_agent_status(simulation_id, agents - 1)
    except SimClientError as e:
        raise _init_failed("status", e) from e

    return EstablishedSimulation(
        simulation_id=simulation_id,
        agents=agents,
        create_response=create_response,
        start_response=start_response,
        agent_status=agent_status,
    )


def _init_failed(stage: str, cause: SimClientError) -> SimulationInitError:
    cause.stage = stage
    logger.warning("Simulation init failed at %s stage: %s", stage, cause)
    return SimulationInitError(stage, cause)


def _parse_create_response(payload: Any) -> tuple[int, int]:
    if not isinstance(payload, dict):
        raise ResponseShapeError(f"create response is not an object: {payload!r}")

    simulation_id = _as_int(payload.get("simulationId"))
    if simulation_id is None:
        raise ResponseShapeError(f"create response has no usable simulationId: {payload!r}")

    data = normalize_response(payload.get("simulationData"))
    agents = _as_int(data.get("NumAgents")) if isinstance(data, dict) else None
    if agents is None or agents < 1:
        raise ResponseShapeError(f"create response has no usable NumAgents: {payload!r}")

    return simulation_id, agents


def _as_int(value: Any) -> int | None:
    # NumAgents shows up as 3, 3.0, "3" or "3 agents"; strings take the leading integer
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        return int(m.group(1)) if m else None
    return None
