from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from .state import Heading, SimulationState

ACTIONS = ("moveForward", "turnLeft", "turnRight", "pickUp", "drop", "idle")

# env name -> (agent count, grid size, item cells)
ENVIRONMENTS = {
    "HW1": (1, 5, {(2, 2)}),
    "HW2": (2, 6, {(1, 3), (4, 4)}),
    "HW3": (3, 8, {(0, 7), (3, 3), (6, 1)}),
}

_STEP = {
    Heading.NORTH: (0, 1),
    Heading.EAST: (1, 0),
    Heading.SOUTH: (0, -1),
    Heading.WEST: (-1, 0),
}

@dataclass
class Agent:
    agent_id: int
    position: tuple[int, int]
    heading: Heading = Heading.NORTH
    holding: bool = False
    pending: tuple[str, Any] | None = None
    last_action: str | None = None
    mode: Any = None

@dataclass
class Simulation:
    simulation_id: int
    env_name: str
    size: int
    items: set[tuple[int, int]]
    agents: list[Agent]
    state: SimulationState = SimulationState.CREATED
    step: int = 0

    def start(self) -> None:
        if self.state != SimulationState.CREATED:
            raise ValueError(f"Invalid transition: {self.state} -> RUNNING")
        self.state = SimulationState.RUNNING

    def submit(self, agent_id: int, action: str, mode: Any) -> None:
        if self.state != SimulationState.RUNNING:
            raise ValueError("simulation is not running")
        self.agents[agent_id].pending = (action, mode)

    def advance(self) -> int:
        if self.state != SimulationState.RUNNING:
            raise ValueError("simulation is not running")
        for agent in self.agents:
            action, mode = agent.pending or ("idle", agent.mode)
            self._apply(agent, action)
            agent.pending = None
            agent.last_action, agent.mode = action, mode
        self.step += 1
        return self.step

    def _apply(self, agent: Agent, action: str) -> None:
        if action == "turnLeft":
            agent.heading = agent.heading.turned(-1)
        elif action == "turnRight":
            agent.heading = agent.heading.turned(1)
        elif action == "moveForward":
            dx, dy = _STEP[agent.heading]
            x, y = agent.position[0] + dx, agent.position[1] + dy
            # walls block movement
            if 0 <= x < self.size and 0 <= y < self.size:
                agent.position = (x, y)
        elif action == "pickUp":
            if not agent.holding and agent.position in self.items:
                self.items.discard(agent.position)
                agent.holding = True
        elif action == "drop":
            if agent.holding:
                self.items.add(agent.position)
                agent.holding = False

    def status(self, agent_id: int) -> dict:
        agent = self.agents[agent_id]
        return {
            "agentId": agent.agent_id,
            "position": list(agent.position),
            "heading": agent.heading.value,
            "holding": agent.holding,
            "step": self.step,
            "lastAction": agent.last_action,
            "mode": agent.mode,
        }

@dataclass
class SimModel:
    simulations: dict[int, Simulation] = field(default_factory=dict)
    next_id: int = 1
    reset_count: int = 0

    def reset(self) -> None:
        self.simulations.clear()
        self.next_id = 1
        self.reset_count += 1

    def create(self, env_name: str) -> Simulation:
        if env_name not in ENVIRONMENTS:
            raise KeyError(env_name)
        n_agents, size, items = ENVIRONMENTS[env_name]
        sim = Simulation(
            simulation_id=self.next_id,
            env_name=env_name,
            size=size,
            items=set(items),
            agents=[Agent(agent_id=i, position=(i, 0)) for i in range(n_agents)],
        )
        self.simulations[sim.simulation_id] = sim
        self.next_id += 1
        return sim
