from enum import Enum

class SimulationState(str, Enum):
    CREATED = "CREATED"
    RUNNING = "RUNNING"


class Heading(str, Enum):
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    def turned(self, quarter_turns: int) -> "Heading":
        order = list(Heading)
        return order[(order.index(self) + quarter_turns) % len(order)]
