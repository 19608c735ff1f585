from __future__ import annotations

import logging
from typing import Dict
from uuid import uuid4

from fastapi import FastAPI, HTTPException

from .errors import InvalidHorizon, InvalidParameter, StoreAddRejected, StoreRemoveRejected
from .loader import load_parameter_set
from .schemas import (
    CanAddStoreResponse,
    EventListResponse,
    FormValidationRequest,
    FormValidationResponse,
    HistoryResponse,
    SimulationRequest,
    SimulationResponse,
    StoreEditRequest,
    ViabilityRequest,
    ViabilityResponse,
)
from .services.event_log import EventLog, SimulationHistoryEntry
from .services.simulator import SimulationEngine, validate_form_data
from .services.store_editor import StoreEditSession
from .services.viability import ViabilityAnalyzer
from .settings import Settings

settings = Settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Franchise Investment Simulator", version="0.1.0")

params = load_parameter_set(settings.params_file)
engine = SimulationEngine(params)
analyzer = ViabilityAnalyzer(params)
event_log = EventLog(settings.event_log_limit, settings.history_limit)

SESSIONS: Dict[str, StoreEditSession] = {}
REQUESTS: Dict[str, SimulationRequest] = {}


def _get_session(simulation_id: str) -> StoreEditSession:
    session = SESSIONS.get(simulation_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Simulation not found")
    return session


def _response(simulation_id: str, session: StoreEditSession) -> SimulationResponse:
    return SimulationResponse(simulation_id=simulation_id, result=session.current, has_edits=session.has_edits)


@app.post("/simulations", response_model=SimulationResponse)
def create_simulation(payload: SimulationRequest) -> SimulationResponse:
    horizon = payload.horizon_months if payload.horizon_months is not None else settings.default_horizon_months
    try:
        result = engine.simulate(
            payload.desired_monthly_profit,
            payload.initial_investment,
            payload.operating_profile,
            horizon,
            payload.scenario,
            start_date=payload.start_date,
        )
    except (InvalidHorizon, InvalidParameter) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    simulation_id = uuid4().hex
    SESSIONS[simulation_id] = StoreEditSession(result)
    REQUESTS[simulation_id] = payload
    event_log.record_attribution(payload.utm_params, payload.url)
    event_log.save_simulation_history(
        SimulationHistoryEntry(
            id=simulation_id,
            url=payload.url,
            simulation=payload.model_dump(mode="json", exclude={"utm_params", "url"}),
            utm_params=payload.utm_params,
        )
    )
    logger.info("Created simulation %s (investment=%.2f)", simulation_id, payload.initial_investment)
    return _response(simulation_id, SESSIONS[simulation_id])


@app.get("/simulations/{simulation_id}", response_model=SimulationResponse)
def get_simulation(simulation_id: str) -> SimulationResponse:
    return _response(simulation_id, _get_session(simulation_id))


@app.get("/simulations/{simulation_id}/stores/{month}/can-add", response_model=CanAddStoreResponse)
def can_add_store(simulation_id: str, month: int) -> CanAddStoreResponse:
    session = _get_session(simulation_id)
    return CanAddStoreResponse(month=month, can_add=session.can_add_store(month))


@app.post("/simulations/{simulation_id}/stores", response_model=SimulationResponse)
def add_store(simulation_id: str, payload: StoreEditRequest) -> SimulationResponse:
    session = _get_session(simulation_id)
    try:
        session.add_store(payload.month)
    except StoreAddRejected as exc:
        raise HTTPException(status_code=409, detail=exc.reason) from exc
    return _response(simulation_id, session)


@app.delete("/simulations/{simulation_id}/stores/{month}", response_model=SimulationResponse)
def remove_store(simulation_id: str, month: int) -> SimulationResponse:
    session = _get_session(simulation_id)
    try:
        session.remove_store(month)
    except StoreRemoveRejected as exc:
        raise HTTPException(status_code=409, detail=exc.reason) from exc
    return _response(simulation_id, session)


@app.post("/simulations/{simulation_id}/revert", response_model=SimulationResponse)
def revert_simulation(simulation_id: str) -> SimulationResponse:
    session = _get_session(simulation_id)
    session.revert()
    return _response(simulation_id, session)


@app.get("/simulations/{simulation_id}/viability", response_model=ViabilityResponse)
def simulation_viability(simulation_id: str) -> ViabilityResponse:
    session = _get_session(simulation_id)
    request = REQUESTS[simulation_id]
    analysis = analyzer.analyze_with_results(
        request.initial_investment,
        request.desired_monthly_profit,
        request.operating_profile,
        session.current.monthly_results,
    )
    return ViabilityResponse(analysis=analysis)


@app.post("/viability", response_model=ViabilityResponse)
def viability(payload: ViabilityRequest) -> ViabilityResponse:
    try:
        analysis = analyzer.analyze(
            payload.investment,
            payload.desired_profit,
            payload.operating_profile,
            payload.scenario,
        )
    except InvalidParameter as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ViabilityResponse(analysis=analysis)


@app.post("/validate", response_model=FormValidationResponse)
def validate(payload: FormValidationRequest) -> FormValidationResponse:
    return FormValidationResponse(
        valid=validate_form_data(params, payload.desired_monthly_profit, payload.initial_investment)
    )


@app.get("/events", response_model=EventListResponse)
def list_events() -> EventListResponse:
    return EventListResponse(events=event_log.events())


@app.get("/history", response_model=HistoryResponse)
def list_history() -> HistoryResponse:
    return HistoryResponse(history=event_log.history())


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
