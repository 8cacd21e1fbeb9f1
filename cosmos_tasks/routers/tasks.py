import logging
from typing import FrozenSet, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ..database import get_allowed_containers, get_cosmos_service
from ..models import TaskItem
from ..schemas.task import BulkInsertResult, DeleteResult, RemainingDays
from ..services.cosmos_service import CosmosService

logger = logging.getLogger(__name__)

router = APIRouter()

SELECT_ALL_QUERY = "select * from c"
REMAINING_DAYS_QUERY = "select c.Assignee, c.TaskName, udf.getDaysLeft(c.Deadline) as DayLeft from c"

NOT_FOUND_MESSAGE = "Required data not found."


def valid_container(
    container_name: str = Query(..., alias="containerName"),
    allowed_containers: FrozenSet[str] = Depends(get_allowed_containers),
) -> str:
    """Reject container names outside the configured allow-list."""
    if container_name not in allowed_containers:
        logger.warning("Rejected request for container %r", container_name)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid container name.",
        )
    return container_name


def _problem(exc: Exception) -> HTTPException:
    logger.exception("Cosmos request failed")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc),
    )


@router.post("/create-record", response_model=TaskItem)
async def add_task(
    task: TaskItem,
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Create a new task in the container."""
    try:
        created = await service.add_task(task, container_name)
        return TaskItem.model_validate(created)
    except Exception as e:
        raise _problem(e)


@router.get("/get-task", response_model=TaskItem)
async def get_task(
    task_id: str = Query(..., alias="id"),
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Get a task by its ID."""
    try:
        found = await service.get_task(task_id, container_name)
        task = None if found is None else TaskItem.model_validate(found)
    except Exception as e:
        raise _problem(e)

    if task is None:
        raise HTTPException(status_code=500, detail=NOT_FOUND_MESSAGE)
    return task


@router.get("/get-tasks", response_model=List[TaskItem])
async def get_tasks(
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Get every task in the container."""
    try:
        rows = await service.get_tasks(SELECT_ALL_QUERY, container_name)
        tasks = [TaskItem.model_validate(row) for row in rows]
    except Exception as e:
        raise _problem(e)

    if not tasks:
        raise HTTPException(status_code=500, detail=NOT_FOUND_MESSAGE)
    return tasks


@router.get("/get-remaining-days", response_model=List[RemainingDays])
async def get_remaining_days(
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Get every task's name and assignee with the days left until its deadline."""
    try:
        rows = await service.get_tasks(REMAINING_DAYS_QUERY, container_name)
        remaining = [RemainingDays.from_row(row) for row in rows]
    except Exception as e:
        raise _problem(e)

    if not remaining:
        raise HTTPException(status_code=500, detail=NOT_FOUND_MESSAGE)
    return remaining


@router.put("/update-task", response_model=TaskItem)
async def update_task(
    task: TaskItem,
    task_id: str = Query(..., alias="id"),
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Replace an existing task with the given body."""
    try:
        found = await service.get_task(task_id, container_name)
    except Exception as e:
        raise _problem(e)

    if found is None:
        raise HTTPException(status_code=400, detail="No data found to update.")

    try:
        updated = await service.update_task(task_id, container_name, task)
        return TaskItem.model_validate(updated)
    except Exception as e:
        raise _problem(e)


@router.delete("/delete-task", response_model=DeleteResult)
async def delete_task(
    task_id: str = Query(..., alias="id"),
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Delete an existing task."""
    try:
        found = await service.get_task(task_id, container_name)
    except Exception as e:
        raise _problem(e)

    if found is None:
        raise HTTPException(status_code=400, detail="No data found to delete.")

    try:
        await service.delete_task(task_id, container_name)
    except Exception as e:
        raise _problem(e)
    return {"detail": "Task deleted"}


@router.post("/bulk-insert", response_model=BulkInsertResult)
async def bulk_insert(
    tasks: Optional[List[TaskItem]] = Body(default=None),
    container_name: str = Depends(valid_container),
    service: CosmosService = Depends(get_cosmos_service),
):
    """Insert a batch of tasks in one stored procedure call."""
    if not tasks:
        raise HTTPException(status_code=400, detail="No data found to insert.")

    try:
        inserted_count = await service.execute_bulk_insert(container_name, tasks)
    except Exception as e:
        raise _problem(e)

    if inserted_count <= 0:
        raise HTTPException(
            status_code=500,
            detail="Batch data insertion failed. Please contact the admin.",
        )
    return BulkInsertResult(inserted_count=inserted_count)
