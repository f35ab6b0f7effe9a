from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from simwrap.api.actions import AgentAction, require_action, require_env_name, require_id, require_mode
from simwrap.api.errors import (
    InvalidActionError,
    TransportError,
    UnexpectedStatusError,
    UnsupportedMediaTypeError,
)
from simwrap.utils.normalize import normalize_response

if TYPE_CHECKING:
    from simwrap.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0

# named failures of the action endpoint
_ACTION_ERRORS = {
    400: InvalidActionError,
    415: UnsupportedMediaTypeError,
}


class SimulationClient:
    """
    Thin wrapper over the simulation service REST API.

    Each method is a single request. TLS verification and the timeout belong
    to this instance only; pass an `http_client` to reuse an existing
    httpx.Client (its base_url must point at the api prefix).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        verify_tls: bool = True,
        timeout_s: float | None = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
        http_client: httpx.Client | None = None,
    ):
        if http_client is not None:
            # the injected client already carries its own base_url, TLS and timeout
            if base_url or transport is not None or not verify_tls or timeout_s != DEFAULT_TIMEOUT_S:
                raise ValueError(
                    "http_client cannot be combined with base_url, transport, verify_tls or timeout_s"
                )
            self._client = http_client
        else:
            if not base_url:
                raise ValueError("base_url is required when no http_client is given")
            if not verify_tls:
                logger.warning("TLS certificate verification disabled for %s", base_url)
            self._client = httpx.Client(
                base_url=base_url,
                timeout=timeout_s,
                verify=verify_tls,
                transport=transport,
            )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> SimulationClient:
        return cls(
            settings.api_base,
            verify_tls=settings.verify_tls,
            timeout_s=settings.timeout_s,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SimulationClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # lifecycle

    def create_simulation(self, env_name: str) -> Any:
        require_env_name(env_name)
        return self._request("POST", "simulations/create", ok=(200, 201), json={"env_name": env_name})

    def start_simulation(self, simulation_id: int) -> Any:
        require_id("simulation id", simulation_id)
        # only 200 means started; 201 is rejected on purpose
        return self._request("PUT", f"simulations/{simulation_id}/start", ok=(200,))

    def get_agent_status(self, simulation_id: int, agent_id: int) -> Any:
        require_id("simulation id", simulation_id)
        require_id("agent id", agent_id)
        return self._request("GET", f"simulations/{simulation_id}/agents/{agent_id}/status", ok=(200,))

    # actions and steps

    def perform_agent_action(self, simulation_id: int, agent_id: int, action: AgentAction | str, mode: Any) -> Any:
        require_id("simulation id", simulation_id)
        require_id("agent id", agent_id)
        action = require_action(action)
        require_mode(mode)

        return self._request(
            "POST",
            f"simulations/{simulation_id}/agents/{agent_id}/action",
            ok=(200, 201),
            named_errors=_ACTION_ERRORS,
            json={"action": action.value, "mode": mode},
        )

    def simulate_step(self, simulation_id: int) -> Any:
        require_id("simulation id", simulation_id)
        return self._request("PUT", f"simulations/{simulation_id}/step", ok=(200,), json={})

    def _request(
        self,
        method: str,
        path: str,
        *,
        ok: tuple[int, ...],
        named_errors: dict[int, type[UnexpectedStatusError]] | None = None,
        **kwargs: Any,
    ) -> Any:
        logger.debug("%s %s%s", method, self._client.base_url, path)
        try:
            r = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        body = _decode(r)
        if r.status_code not in ok:
            exc_type = (named_errors or {}).get(r.status_code, UnexpectedStatusError)
            raise exc_type(method, str(r.request.url), r.status_code, body)
        return body


def _decode(r: httpx.Response) -> Any:
    if not r.content:
        return None
    try:
        data = r.json()
    except ValueError:
        data = r.text
    return normalize_response(data)
