from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from .models import TaskStats
from .service import TaskService

router = APIRouter(prefix="/api")


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


# Filters combine with AND; no parameters returns every task
@router.get("/tasks")
async def list_tasks(
    search: Optional[str] = Query(None, description="Case-insensitive title match"),
    category: Optional[str] = Query(None),
    priority: Optional[str] = Query(None, description="Exact priority, 1-5"),
    service: TaskService = Depends(get_task_service),
) -> List[Dict[str, Any]]:
    tasks = await service.list_tasks(category=category, priority=priority, search=search)
    return [task.to_response() for task in tasks]


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str, service: TaskService = Depends(get_task_service)
) -> Dict[str, Any]:
    task = await service.get_task(task_id)
    return task.to_response()


@router.post("/tasks", status_code=201)
async def create_task(
    payload: Any = Body(..., examples=[{"title": "Buy milk", "priority": 2}]),
    service: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await service.create_task(payload)
    return task.to_response()


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    payload: Any = Body(...),
    service: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task = await service.update_task(task_id, payload)
    return task.to_response()


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str, service: TaskService = Depends(get_task_service)
) -> Dict[str, str]:
    return await service.delete_task(task_id)


@router.get("/stats", response_model=TaskStats)
async def get_stats(service: TaskService = Depends(get_task_service)) -> TaskStats:
    return await service.stats()
