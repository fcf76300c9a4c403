import hmac
import json
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime

import psycopg
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from jsonschema import ValidationError, validate
from pydantic import BaseModel, ConfigDict

from services.common.behavior_store import BehaviorStore
from services.common.classifier import MessagePolicy
from services.common.logging_config import setup_logging
from services.common.schemas import LOG_EVENT_TYPES, WEBHOOK_PAYLOAD_SCHEMA
from services.webhook.agent_stats import compute_agent_stats, summarize_replies
from services.webhook.config import (
    AGENT_MESSAGE_FILTER_ENABLED,
    DATABASE_URL,
    LOG_LEVEL,
    WEBHOOK_SECRET,
)
from services.webhook.dispatcher import dispatch
from services.webhook.seed_data import PULSE_CHECK_SEED

logger = logging.getLogger(__name__)

message_policy = MessagePolicy(agent_only=AGENT_MESSAGE_FILTER_ENABLED)


def log_message_policy(policy: MessagePolicy) -> None:
    if policy.agent_only:
        logger.info("Agent message filter enabled: only agent/email replies are logged")
    else:
        logger.warning(
            "Agent message filter disabled: messages from every source type are logged"
            " as replies. Set AGENT_MESSAGE_FILTER_ENABLED=true once source types are confirmed."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    log_message_policy(message_policy)
    if not WEBHOOK_SECRET:
        logger.warning("GORGIAS_WEBHOOK_SECRET is not set; every webhook call will be rejected")
    yield


app = FastAPI(
    title="Support Pulse API",
    description="Helpdesk webhook ingestion and read-only support analytics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or f"req-{uuid.uuid4().hex[:12]}"
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


def _error_payload(request: Request, code: str, message: str, details=None) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": getattr(request.state, "request_id", None),
        }
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("message", "Request failed")
        details = detail
    else:
        message = str(detail)
        details = None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(request, f"http_{exc.status_code}", message, details),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=_error_payload(
            request, "validation_error", "Request validation failed", exc.errors()
        ),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=_error_payload(request, "internal_error", "Internal server error"),
    )


# Response models
class AgentBehaviorEvent(BaseModel):
    id: int
    created_at: datetime | None
    event_id: str
    event_type: str
    ticket_id: int | None
    ticket_subject: str | None
    ticket_channel: str | None
    ticket_category: str | None
    ticket_tags: list[str] | None
    ticket_created_at: datetime | None
    agent_id: int | None
    agent_name: str | None
    agent_email: str | None
    response_char_count: int | None
    is_macro: bool | None
    macro_id: int | None
    macro_name: str | None
    message_position: int | None
    time_to_first_response_min: float | None
    touches_to_resolution: int | None
    csat_score: int | None
    resolved_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AgentBehaviorListResponse(BaseModel):
    events: list[AgentBehaviorEvent]
    count: int


class AgentStats(BaseModel):
    name: str
    replies: int
    tickets: int
    first_responses: int
    avg_first_response_min: float | None
    macro_uses: int
    macro_rate: int
    avg_csat: float | None
    avg_touches: float | None


class AgentStatsResponse(BaseModel):
    total_replies: int
    active_agents: int
    avg_first_response_min: float | None
    macro_rate: int
    agents: list[AgentStats]


class PulseCheck(BaseModel):
    id: str
    created_at: datetime
    date_range_start: date
    date_range_end: date
    ticket_count: int
    open_count: int
    closed_count: int
    resolution_avg_min: float
    resolution_p50_min: float
    resolution_p90_min: float
    tickets_analyzed: int
    spam_pct: float
    unassigned_pct: float
    channel_email: int
    channel_chat: int
    workload: dict[str, int]
    top_questions: list[dict]
    tags: dict[str, int]
    ops_notes: list[str]


class SeedResponse(BaseModel):
    message: str
    count: int


class HealthResponse(BaseModel):
    status: str
    database: str
    timestamp: str


# Database connection helper
def get_db_connection():
    try:
        return psycopg.connect(DATABASE_URL)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Database connection failed: {str(e)}") from e


def _dispatch_event(payload: dict):
    # Blocking: may wait on another delivery's ticket lock.
    with get_db_connection() as conn:
        return dispatch(BehaviorStore(conn), payload, message_policy)


def _secret_matches(secret: str | None) -> bool:
    if not secret or not WEBHOOK_SECRET:
        return False
    return hmac.compare_digest(secret.encode("utf-8"), WEBHOOK_SECRET.encode("utf-8"))


# Endpoints
@app.get("/", response_model=dict)
async def root():
    """Root endpoint with API information"""
    return {
        "service": "Support Pulse API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "webhook": "POST /webhooks/gorgias/events?secret=...",
            "agent_behavior": "/agent-behavior",
            "agent_stats": "/agent-behavior/stats",
            "pulse_checks": "/pulse-checks",
            "seed": "POST /seed",
        },
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint for monitoring"""
    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1")
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        database=db_status,
        timestamp=datetime.now(UTC).isoformat(),
    )


@app.post("/webhooks/gorgias/events")
async def gorgias_webhook(request: Request, secret: str | None = Query(None)):
    """
    Receive a helpdesk webhook delivery and log agent behavior.

    Only a missing or wrong shared secret is surfaced (401). Parse and
    database errors are logged and answered with success so the helpdesk
    does not retry-storm a struggling database.
    """
    if not _secret_matches(secret):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    raw = await request.body()
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError):
        logger.error("Failed to parse webhook JSON body", extra={"bytes": len(raw)})
        return {"success": True}

    try:
        validate(instance=payload, schema=WEBHOOK_PAYLOAD_SCHEMA)
    except ValidationError as e:
        logger.warning("Webhook payload rejected: %s", e.message)
        return {"success": True}

    event_type = payload["event_type"]
    try:
        result = await run_in_threadpool(_dispatch_event, payload)
        logger.info(
            "Webhook processed",
            extra={
                "event_type": event_type,
                "action": result.action,
                "event_id": result.event_id,
                "rows": result.rows,
            },
        )
    except Exception:
        logger.exception("Error processing webhook event", extra={"event_type": event_type})

    return {"success": True}


@app.get("/agent-behavior", response_model=AgentBehaviorListResponse)
async def list_agent_behavior(
    limit: int = Query(100, ge=1, le=500, description="Max rows"),
    event_type: str | None = Query(None, description="Filter by logged event type"),
    ticket_id: int | None = Query(None, description="Filter by ticket id"),
):
    """Most recent agent behavior log rows, newest first"""
    if event_type and event_type not in LOG_EVENT_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown event type: {event_type}")

    with get_db_connection() as conn:
        rows = BehaviorStore(conn).list_events(limit, event_type, ticket_id)

    events = [AgentBehaviorEvent(**row) for row in rows]
    return AgentBehaviorListResponse(events=events, count=len(events))


@app.get("/agent-behavior/stats", response_model=AgentStatsResponse)
async def get_agent_stats(
    limit: int = Query(500, ge=1, le=5000, description="Rows to aggregate"),
):
    """
    Per-agent reply statistics over the most recent log rows

    Includes reply counts, first-response averages, macro usage rate,
    average CSAT and average touches to resolution.
    """
    with get_db_connection() as conn:
        rows = BehaviorStore(conn).list_events(limit)

    agents = compute_agent_stats(rows)
    summary = summarize_replies(rows)
    return AgentStatsResponse(
        total_replies=summary["total_replies"],
        active_agents=len(agents),
        avg_first_response_min=summary["avg_first_response_min"],
        macro_rate=summary["macro_rate"],
        agents=[AgentStats(**a) for a in agents],
    )


@app.get("/pulse-checks", response_model=list[PulseCheck])
async def list_pulse_checks(
    limit: int = Query(30, ge=1, le=100, description="Max snapshots"),
):
    """Latest pulse-check snapshots, newest first"""
    with get_db_connection() as conn:
        rows = BehaviorStore(conn).list_pulse_checks(limit)
    return [PulseCheck(**{**row, "id": str(row["id"])}) for row in rows]


@app.post("/seed", response_model=SeedResponse)
async def seed_pulse_checks():
    """Insert illustrative pulse checks when the table is empty"""
    try:
        with get_db_connection() as conn:
            store = BehaviorStore(conn)
            existing = store.count_pulse_checks()
            if existing > 0:
                return SeedResponse(message="Data already exists", count=existing)
            with store.transaction():
                inserted = store.insert_pulse_checks(PULSE_CHECK_SEED)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to seed: {str(e)}") from e

    return SeedResponse(message="Seeded successfully", count=inserted)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
