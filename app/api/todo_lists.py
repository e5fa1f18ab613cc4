"""
/todo-lists 待办清单接口：所有操作限定在当前登录用户名下
"""

import uuid

from fastapi import APIRouter, Depends, Response

from app.api.deps import PageParams, get_page_params, get_todo_list_filters, get_todo_list_service
from app.common.response import api_response
from app.security.auth import AuthenticatedUser, get_current_user
from app.todo import TodoListService
from app.todo.schemas import TodoListCreate, TodoListFilters, TodoListUpdate

router = APIRouter(prefix="/todo-lists", tags=["待办清单"])


@router.post("", status_code=201)
async def create_todo_list(
    body: TodoListCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TodoListService = Depends(get_todo_list_service),
):
    result = await service.create(body, user.id)
    return api_response(result, 201)


@router.get("")
async def list_todo_lists(
    user: AuthenticatedUser = Depends(get_current_user),
    paging: PageParams = Depends(get_page_params),
    filters: TodoListFilters = Depends(get_todo_list_filters),
    service: TodoListService = Depends(get_todo_list_service),
):
    """分页查询当前用户的清单，search 匹配名称或描述"""
    result = await service.list_by_owner(
        user.id, filters, page=paging.page, limit=paging.limit, url=paging.url
    )
    return api_response(result)


@router.get("/{list_id}")
async def get_todo_list(
    list_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TodoListService = Depends(get_todo_list_service),
):
    result = await service.get_by_id(list_id, user.id)
    return api_response(result)


@router.patch("/{list_id}")
async def update_todo_list(
    list_id: uuid.UUID,
    body: TodoListUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TodoListService = Depends(get_todo_list_service),
):
    result = await service.update(list_id, user.id, body)
    return api_response(result)


@router.delete("/{list_id}", status_code=204)
async def delete_todo_list(
    list_id: uuid.UUID,
    user: AuthenticatedUser = Depends(get_current_user),
    service: TodoListService = Depends(get_todo_list_service),
):
    await service.delete(list_id, user.id)
    return Response(status_code=204)
