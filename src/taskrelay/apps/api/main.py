from __future__ import annotations

import os
from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn
from fastapi import FastAPI

from taskrelay.core.http.client import close_http_client
from taskrelay.core.logging import configure_logging
from taskrelay.core.logging.context import log_context
from taskrelay.core.runtime.loader import is_configured

from .deps import get_event_bus, get_registry, get_run_state, get_runtime, get_state_dir
from .routes_commands import router as commands_router
from .routes_events import router as events_router
from .routes_projects import router as projects_router
from .routes_projects import targets_router
from .routes_settings import router as settings_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_state_dir())
    # A fresh process never has a task in flight.
    get_registry().reset()
    yield
    await close_http_client()


app = FastAPI(title="TaskRelay API", lifespan=lifespan)

app.include_router(commands_router, prefix="/commands", tags=["commands"])
app.include_router(events_router, tags=["events"])
app.include_router(settings_router, prefix="/settings", tags=["settings"])
app.include_router(projects_router, prefix="/projects", tags=["projects"])
app.include_router(targets_router, prefix="/targets", tags=["targets"])


@app.middleware("http")
async def request_context_middleware(request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    with log_context(correlation_id=correlation_id):
        response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.get("/state")
def state() -> dict:
    registry = get_registry()
    current = registry.current
    return {
        **get_run_state().snapshot(),
        "slot": registry.state.value,
        "active_task_ids": registry.tracked_task_ids(),
        "task": None if current is None else {"id": current.id, "prompt": current.prompt, "state": current.state.value},
    }


@app.get("/healthz")
def healthz() -> dict:
    return {
        "ok": True,
        "runtime_configured": is_configured(get_runtime()),
        "listeners": get_event_bus().listener_count(),
        "state_dir": str(get_state_dir()),
    }


def run() -> None:
    uvicorn.run(
        "taskrelay.apps.api.main:app",
        host=os.getenv("TASKRELAY_HOST", "127.0.0.1"),
        port=int(os.getenv("TASKRELAY_PORT", "8000")),
    )
