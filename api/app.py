"""HTTP API: hosts post a snapshot, the engine answers with a joint action."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from agents import AgentSpec, MinimaxAgent, create_agent_from_spec
from env.core.types import Side
from env.scenario import Scenario
from infra.config import get_settings
from infra.logger import get_logger

log = get_logger(__name__)

app = FastAPI(title="Skirmish minimax engine")

# Allow browser-based hosts (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class DecideRequest(BaseModel):
    scenario: dict
    plies: int | None = Field(
        default=None,
        ge=1,
        description="Search depth; overrides the scenario's agent spec and the default.",
    )


class DecideResponse(BaseModel):
    actions: list
    value: float
    metadata: dict


def _build_agent(scenario: Scenario, plies: int | None):
    spec = scenario.agent or AgentSpec(type="minimax", side=Side.CONTROLLED)
    if plies is not None:
        spec = AgentSpec(
            type=spec.type,
            side=spec.side,
            name=spec.name,
            init_params={**spec.init_params, "plies": plies},
        )
    return create_agent_from_spec(spec)


@app.post("/decide", response_model=DecideResponse)
def decide(request: DecideRequest):
    try:
        scenario = Scenario.from_dict(request.scenario)
        state = scenario.build_state()
        agent = _build_agent(scenario, request.plies)
        _actions, metadata = agent.get_actions(state)
    except ValueError as exc:
        log.warning("Rejected decision request: %s", exc)
        raise HTTPException(400, str(exc)) from exc

    log.info("Decision served for %s", scenario)
    return DecideResponse(
        actions=metadata["actions"],
        value=metadata["value"],
        metadata=metadata,
    )


@app.get("/health")
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "default_plies": settings.plies,
        "agent": MinimaxAgent.__name__,
    }
