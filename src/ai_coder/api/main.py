"""FastAPI app entrypoint for ai-coder."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from ai_coder.config.settings import Settings, get_settings
from ai_coder.providers import Provider, provider_factory
from ai_coder.storage.base import TaskStorage
from ai_coder.storage.models import Task, TaskStatus
from ai_coder.storage.postgres import PostgresTaskStorage
from ai_coder.tools import list_tools

logger = logging.getLogger(__name__)


class InputRequest(BaseModel):
    message: str = Field(min_length=1)


class NextTaskRequest(BaseModel):
    docker_image: str = Field(min_length=1)


class TaskUpdateRequest(BaseModel):
    status: TaskStatus
    results: str | None = None


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    storage_override: TaskStorage | None,
    provider_override: Provider | None,
) -> None:
    if not hasattr(app.state, "storage"):
        database_url = settings.resolved_database_url()
        if storage_override is None and not database_url:
            raise RuntimeError(
                "Missing database URL. Set AI_CODER_DATABASE_URL "
                "or DATABASE_URL before starting the app."
            )
        app.state.storage = storage_override or PostgresTaskStorage(database_url)
        app.state.storage.migrate()

    if not hasattr(app.state, "provider"):
        # An unknown provider name is a configuration error and is not caught.
        app.state.provider = provider_override or provider_factory(
            settings.llm_provider, settings=settings
        )

    if not hasattr(app.state, "settings"):
        app.state.settings = settings


def create_app(
    *,
    storage: TaskStorage | None = None,
    provider: Provider | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    settings = settings_override or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_runtime_state(
            app,
            settings=settings,
            storage_override=storage,
            provider_override=provider,
        )
        yield

    app_lifespan = lifespan if storage is None else None
    app = FastAPI(title=settings.app_name, lifespan=app_lifespan)

    # Keep test paths reliable when lifespan is not executed by the client.
    if storage is not None:
        _ensure_runtime_state(
            app,
            settings=settings,
            storage_override=storage,
            provider_override=provider,
        )

    def _runtime(request: Request) -> tuple[TaskStorage, Provider]:
        if not hasattr(request.app.state, "storage"):
            _ensure_runtime_state(
                request.app,
                settings=settings,
                storage_override=storage,
                provider_override=provider,
            )
        return request.app.state.storage, request.app.state.provider

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/tools")
    def tools() -> dict[str, list[dict[str, Any]]]:
        return {
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                }
                for tool in list_tools()
            ]
        }

    @app.get("/flows/{flow_id}/tasks", response_model=list[Task])
    def list_flow_tasks(flow_id: int, request: Request) -> list[Task]:
        task_storage, _ = _runtime(request)
        return task_storage.list_tasks(flow_id)

    @app.post("/flows/{flow_id}/input", response_model=Task)
    def submit_input(flow_id: int, payload: InputRequest, request: Request) -> Task:
        task_storage, _ = _runtime(request)
        return task_storage.create_task(
            Task(
                type="input",
                status="done",
                args="{}",
                message=payload.message,
                flow_id=flow_id,
            )
        )

    @app.post("/flows/{flow_id}/next-task", response_model=Task)
    def next_task(flow_id: int, payload: NextTaskRequest, request: Request) -> Task:
        task_storage, llm_provider = _runtime(request)
        history = task_storage.list_tasks(flow_id)
        task = llm_provider.next_task(tasks=history, docker_image=payload.docker_image)
        logger.info(
            "Next task flow_id=%s provider=%s type=%s tool_call=%s",
            flow_id,
            llm_provider.name,
            task.type,
            bool(task.tool_call_id),
        )
        return task_storage.create_task(task.model_copy(update={"flow_id": flow_id}))

    @app.patch("/tasks/{task_id}", response_model=Task)
    def update_task(task_id: int, payload: TaskUpdateRequest, request: Request) -> Task:
        task_storage, _ = _runtime(request)
        if task_storage.get_task(task_id) is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return task_storage.update_task(task_id, status=payload.status, results=payload.results)

    return app


app = create_app()
