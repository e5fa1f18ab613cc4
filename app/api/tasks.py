"""
/todo-lists/{list_id}/tasks 任务接口

任务归属通过清单传递；路径中的 list_id 必须与任务实际所属清单一致。
"""

import uuid

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps import PageParams, get_page_params, get_task_filters, get_task_service
from app.common.response import api_response
from app.security.auth import AuthenticatedUser, get_current_user
from app.todo import TaskService
from app.todo.schemas import TaskCreate, TaskFilters, TaskUpdate

router = APIRouter(prefix="/todo-lists/{list_id}/tasks", tags=["任务"])


@router.post("", status_code=201)
async def create_task(
    list_id: uuid.UUID,
    body: TaskCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    result = await service.create(list_id, body, user.id)
    return api_response(result, 201)


@router.get("")
async def list_tasks(
    list_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    paging: PageParams = Depends(get_page_params),
    filters: TaskFilters = Depends(get_task_filters),
    service: TaskService = Depends(get_task_service),
):
    """分页查询清单内任务：支持 status / priority / search / 截止时间区间过滤"""
    result = await service.list_by_parent(
        list_id, user.id, filters, page=paging.page, limit=paging.limit, url=paging.url
    )
    return api_response(result)


@router.get("/{task_id}")
async def get_task(
    list_id: uuid.UUID,
    task_id: uuid.UUID,
    include_deleted: bool = Query(False),
    user: AuthenticatedUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    result = await service.get_by_id(task_id, user.id, list_id=list_id, include_deleted=include_deleted)
    return api_response(result)


@router.patch("/{task_id}")
async def update_task(
    list_id: uuid.UUID,
    task_id: uuid.UUID,
    body: TaskUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    result = await service.update(task_id, user.id, body, list_id=list_id)
    return api_response(result)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    list_id: uuid.UUID,
    task_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    await service.delete(task_id, user.id, list_id=list_id)
    return Response(status_code=204)
