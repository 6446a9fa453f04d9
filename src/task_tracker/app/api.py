# task_tracker/app/api.py
import logging
from typing import List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ValidationError

from common.audit_client import AuditClient
from .schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from .storage import InMemoryTaskStorage

logger = logging.getLogger("task_tracker.api")

router = APIRouter(prefix="/tasks", tags=["tasks"])

ModelT = TypeVar("ModelT", bound=BaseModel)

# всё, кроме PUT и DELETE, на /tasks/{id} отвечает 405 (после разбора id)
OTHER_ITEM_METHODS = ["GET", "POST", "PATCH", "HEAD", "OPTIONS"]
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def get_storage(request: Request) -> InMemoryTaskStorage:
    """Хранилище создаётся один раз в create_app и живёт в app.state."""
    return request.app.state.storage


def get_audit(request: Request) -> AuditClient:
    return request.app.state.audit


def _trace_id(request: Request) -> Optional[str]:
    return getattr(request.state, "trace_id", None)


async def _parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Тело читаем как JSON независимо от Content-Type
    (так ведёт себя исходный сервис, например с `curl -d`).
    """
    raw = await request.body()
    try:
        return model.model_validate_json(raw)
    except ValidationError:
        logger.info(
            "Rejected %s %s: invalid body trace_id=%s",
            request.method,
            request.url.path,
            _trace_id(request),
        )
        raise HTTPException(status_code=400, detail="Invalid input")


@router.get("", response_model=List[TaskResponse])
async def list_tasks(storage: InMemoryTaskStorage = Depends(get_storage)):
    return [task.to_dict() for task in storage.list_all()]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    storage: InMemoryTaskStorage = Depends(get_storage),
    audit: AuditClient = Depends(get_audit),
):
    body = await _parse_body(request, TaskCreateRequest)
    trace_id = _trace_id(request)
    task = storage.create(body.title)

    logger.info("Task created task_id=%s trace_id=%s", task.id, trace_id)
    await audit.log(
        level="INFO",
        message="Task created",
        trace_id=trace_id,
        task_id=task.id,
        context={"title_length": len(task.title)},
    )
    return task.to_dict()


@router.api_route("/", methods=ALL_METHODS, include_in_schema=False)
async def missing_task_id():
    # /tasks/ без id: пустой id не число
    raise HTTPException(status_code=400, detail="Invalid task id")


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    request: Request,
    storage: InMemoryTaskStorage = Depends(get_storage),
    audit: AuditClient = Depends(get_audit),
):
    body = await _parse_body(request, TaskUpdateRequest)
    trace_id = _trace_id(request)
    task, found = storage.update(task_id, body.done)
    if not found:
        logger.info("Update of missing task task_id=%s trace_id=%s", task_id, trace_id)
        await audit.log(
            level="WARNING",
            message="Task not found",
            trace_id=trace_id,
            task_id=task_id,
            context={"method": request.method},
        )
        raise HTTPException(status_code=404, detail="Task not found")

    logger.info("Task updated task_id=%s done=%s trace_id=%s", task_id, task.done, trace_id)
    await audit.log(
        level="INFO",
        message="Task updated",
        trace_id=trace_id,
        task_id=task_id,
        context={"done": task.done},
    )
    return task.to_dict()


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    request: Request,
    storage: InMemoryTaskStorage = Depends(get_storage),
    audit: AuditClient = Depends(get_audit),
):
    trace_id = _trace_id(request)
    if not storage.delete(task_id):
        logger.info("Delete of missing task task_id=%s trace_id=%s", task_id, trace_id)
        await audit.log(
            level="WARNING",
            message="Task not found",
            trace_id=trace_id,
            task_id=task_id,
            context={"method": request.method},
        )
        raise HTTPException(status_code=404, detail="Task not found")

    logger.info("Task deleted task_id=%s trace_id=%s", task_id, trace_id)
    await audit.log(
        level="INFO",
        message="Task deleted",
        trace_id=trace_id,
        task_id=task_id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route("/{task_id}", methods=OTHER_ITEM_METHODS, include_in_schema=False)
async def task_method_not_allowed(task_id: int):
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method Not Allowed",
        headers={"Allow": "PUT, DELETE"},
    )
