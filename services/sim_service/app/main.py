import json
import os
from fastapi import APIRouter, FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field

from services.sim_service.app.core.world import ACTIONS, SimModel, Simulation

HTTP_HOST = os.getenv("SIM_HTTP_HOST", "127.0.0.1")
HTTP_PORT = int(os.getenv("SIM_HTTP_PORT", "8000"))

app = FastAPI(title="Simulation Service (fake)", version="0.1.0")
api = APIRouter(prefix="/api")

MODEL = SimModel()

class CreateIn(BaseModel):
    env_name: str = Field(..., min_length=1)

def _json_string(payload) -> Response:
    # the real service double-encodes some bodies; clients must cope
    return Response(content=json.dumps(json.dumps(payload)), media_type="application/json")

def _simulation(simulation_id: int) -> Simulation:
    sim = MODEL.simulations.get(simulation_id)
    if sim is None:
        raise HTTPException(status_code=404, detail=f"unknown simulation {simulation_id}")
    return sim

def _check_agent(sim: Simulation, agent_id: int) -> None:
    if not 0 <= agent_id < len(sim.agents):
        raise HTTPException(status_code=404, detail=f"unknown agent {agent_id}")

@app.get("/health")
def health():
    return {"status": "ok", "simulations": len(MODEL.simulations)}

@app.post("/control/reset")
def reset():
    MODEL.reset()
    return {"status": "reset", "reset_count": MODEL.reset_count}

@api.post("/simulations/create", status_code=201)
def create_simulation(body: CreateIn):
    try:
        sim = MODEL.create(body.env_name)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"unknown environment {body.env_name}")
    return {
        "simulationId": sim.simulation_id,
        "simulationData": {
            "env_name": sim.env_name,
            "NumAgents": str(len(sim.agents)),
            "state": sim.state.value,
        },
    }

@api.put("/simulations/{simulation_id}/start")
def start_simulation(simulation_id: int):
    sim = _simulation(simulation_id)
    try:
        sim.start()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _json_string({"simulationId": sim.simulation_id, "state": sim.state.value})

@api.post("/simulations/{simulation_id}/agents/{agent_id}/action", status_code=201)
async def submit_action(simulation_id: int, agent_id: int, request: Request):
    if not request.headers.get("content-type", "").startswith("application/json"):
        raise HTTPException(status_code=415, detail="no JSON specified")
    sim = _simulation(simulation_id)
    _check_agent(sim, agent_id)

    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="malformed JSON body")
    if not isinstance(body, dict) or body.get("action") not in ACTIONS or body.get("mode") is None:
        raise HTTPException(status_code=400, detail=f"invalid action for simulation {simulation_id}")

    try:
        sim.submit(agent_id, body["action"], body["mode"])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "accepted", "action": body["action"]}

@api.put("/simulations/{simulation_id}/step")
def step(simulation_id: int):
    sim = _simulation(simulation_id)
    try:
        n = sim.advance()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"simulationId": sim.simulation_id, "step": n}

@api.get("/simulations/{simulation_id}/agents/{agent_id}/status")
def agent_status(simulation_id: int, agent_id: int):
    sim = _simulation(simulation_id)
    _check_agent(sim, agent_id)
    return _json_string(sim.status(agent_id))

app.include_router(api)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=HTTP_HOST,
        port=HTTP_PORT,
        reload=False)
