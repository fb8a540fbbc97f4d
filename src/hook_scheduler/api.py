from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hook_scheduler.config import Settings
from hook_scheduler.dispatchers.http import HttpDispatcher
from hook_scheduler.dispatchers.protocol import Dispatcher
from hook_scheduler.domain.job import JobPayload
from hook_scheduler.errors import InvalidInputError, JobNotFoundError, RegistryClosedError
from hook_scheduler.lifecycle import LifecycleManager
from hook_scheduler.registry import JobRegistry
from hook_scheduler.storages.json_file import JsonFileStore
from hook_scheduler.storages.protocol import JobStore


class CreateJobRequest(BaseModel):
    # presence is checked by the registry so that missing fields map to 400
    name: Optional[str] = None
    schedule: Optional[str] = None
    payload: Optional[JobPayload] = None


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[JobStore] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    """
    Build the HTTP application around a registry and its lifecycle.

    The registry is restored on startup and shut down (disarmed and flushed)
    when the server stops, including on SIGINT/SIGTERM.
    """
    settings = settings or Settings()
    registry = JobRegistry(
        store or JsonFileStore(settings.store_path),
        dispatcher or HttpDispatcher(settings.dispatch_timeout_seconds),
        tz=settings.tz,
        history_limit=settings.firing_history_limit,
    )
    lifecycle = LifecycleManager(registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await lifecycle.startup()
        yield
        # Shutdown
        await lifecycle.shutdown()

    app = FastAPI(title="hook-scheduler", lifespan=lifespan)
    app.state.registry = registry
    app.state.lifecycle = lifecycle

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        messages = [error.get("msg", "invalid value") for error in exc.errors()]
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": messages})

    @app.exception_handler(JobNotFoundError)
    async def not_found(request: Request, exc: JobNotFoundError):
        return JSONResponse(status_code=404, content={"error": "Job not found"})

    @app.exception_handler(RegistryClosedError)
    async def closed(request: Request, exc: RegistryClosedError):
        return JSONResponse(status_code=503, content={"error": "Scheduler is shutting down"})

    @app.post("/jobs", status_code=201)
    async def create_job(request: CreateJobRequest) -> Dict[str, Any]:
        job = await registry.create(request.name, request.schedule, request.payload)
        return job.public_dict()

    @app.get("/jobs")
    async def list_jobs() -> List[Dict[str, Any]]:
        return [job.public_dict() for job in await registry.list()]

    @app.get("/jobs/{job_id}")
    async def get_job(job_id: str) -> Dict[str, Any]:
        job = await registry.get(job_id)
        return job.public_dict()

    @app.delete("/jobs/{job_id}")
    async def delete_job(job_id: str) -> Dict[str, Any]:
        await registry.delete(job_id)
        return {"ok": True, "message": "Job deleted successfully"}

    @app.get("/jobs/{job_id}/firings")
    async def list_firings(job_id: str, limit: int = Query(20, ge=1)) -> List[Dict[str, Any]]:
        firings = await registry.recent_firings(job_id, limit)
        return [firing.model_dump(mode="json") for firing in firings]

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "ok", "jobs": len(registry)}

    return app
