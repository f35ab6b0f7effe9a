from __future__ import annotations

from enum import Enum
from typing import Any

from simwrap.api.errors import ValidationError


class AgentAction(str, Enum):
    MOVE_FORWARD = "moveForward"
    TURN_LEFT = "turnLeft"
    TURN_RIGHT = "turnRight"
    PICK_UP = "pickUp"
    DROP = "drop"
    IDLE = "idle"


def require_id(field: str, value: Any) -> int:
    # bool is an int subclass; True is not an agent
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, "expected an integer")
    if value < 0:
        raise ValidationError(field, value, "must not be negative")
    return value


def require_action(value: Any) -> AgentAction:
    if isinstance(value, AgentAction):
        return value
    try:
        return AgentAction(value)
    except ValueError:
        allowed = ", ".join(a.value for a in AgentAction)
        raise ValidationError("action", value, f"expected one of {allowed}") from None


def require_mode(value: Any) -> Any:
    if value is None:
        raise ValidationError("mode", value, "must not be null")
    return value


def require_env_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("env_name", value, "expected a non-empty string")
    return value
