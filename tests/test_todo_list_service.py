# tests/test_todo_list_service.py

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.common.errors import NotFound
from app.db.models import Task
from app.todo import TaskService, TodoListService
from app.todo.schemas import TaskCreate, TodoListCreate, TodoListFilters, TodoListUpdate

URL = "http://test/todo-lists"


async def _make_list(service: TodoListService, owner_id, name: str, description: str | None = None):
    return await service.create(TodoListCreate(name=name, description=description), owner_id)


async def test_create_and_get_detail(db, owner) -> None:
    service = TodoListService(db)
    created = await _make_list(service, owner.id, "Groceries", "weekly shop")

    assert created.user_id == owner.id
    assert created.name == "Groceries"

    detail = await service.get_by_id(created.id, owner.id)
    assert detail.id == created.id
    assert detail.description == "weekly shop"
    assert detail.tasks == []


async def test_lists_are_isolated_per_owner(db, owner, other) -> None:
    service = TodoListService(db)
    mine = await _make_list(service, owner.id, "Mine")

    theirs = await service.list_by_owner(other.id, TodoListFilters(), page=1, limit=10, url=URL)
    assert theirs.paging.total_items == 0
    assert theirs.payload == []

    with pytest.raises(NotFound):
        await service.get_by_id(mine.id, other.id)
    with pytest.raises(NotFound):
        await service.update(mine.id, other.id, TodoListUpdate(name="Stolen"))
    with pytest.raises(NotFound):
        await service.delete(mine.id, other.id)

    # still intact for the owner
    assert (await service.get_by_id(mine.id, owner.id)).name == "Mine"


async def test_unknown_id_is_not_found(db, owner) -> None:
    with pytest.raises(NotFound):
        await TodoListService(db).get_by_id(uuid.uuid4(), owner.id)


async def test_list_pagination_newest_first(db, owner) -> None:
    service = TodoListService(db)
    for name in ("First", "Second", "Third"):
        await _make_list(service, owner.id, name)

    page_one = await service.list_by_owner(owner.id, TodoListFilters(), page=1, limit=2, url=URL)
    assert [item.name for item in page_one.payload] == ["Third", "Second"]
    assert page_one.paging.total_items == 3
    assert page_one.paging.next == 2
    assert page_one.paging.previous is None

    page_two = await service.list_by_owner(owner.id, TodoListFilters(), page=2, limit=2, url=URL)
    assert [item.name for item in page_two.payload] == ["First"]
    assert page_two.paging.next is None
    assert page_two.paging.previous == 1


async def test_search_matches_name_or_description_case_insensitively(db, owner) -> None:
    service = TodoListService(db)
    await _make_list(service, owner.id, "Work items", "quarterly goals")
    await _make_list(service, owner.id, "Home", "fix the WORKbench")
    await _make_list(service, owner.id, "Holiday")

    result = await service.list_by_owner(owner.id, TodoListFilters(search="work"), page=1, limit=10, url=URL)

    assert sorted(item.name for item in result.payload) == ["Home", "Work items"]
    assert result.paging.total_items == 2


async def test_search_treats_wildcards_literally(db, owner) -> None:
    service = TodoListService(db)
    await _make_list(service, owner.id, "Plan 100%")
    await _make_list(service, owner.id, "Plan 1000")

    result = await service.list_by_owner(owner.id, TodoListFilters(search="100%"), page=1, limit=10, url=URL)

    assert [item.name for item in result.payload] == ["Plan 100%"]


async def test_partial_update(db, owner) -> None:
    service = TodoListService(db)
    created = await _make_list(service, owner.id, "Groceries", "weekly shop")

    renamed = await service.update(created.id, owner.id, TodoListUpdate(name="Market"))
    assert renamed.name == "Market"
    assert renamed.description == "weekly shop"

    cleared = await service.update(created.id, owner.id, TodoListUpdate(description=None))
    assert cleared.name == "Market"
    assert cleared.description is None

    unchanged = await service.update(created.id, owner.id, TodoListUpdate())
    assert unchanged.name == "Market"


async def test_delete_cascades_to_tasks(db, owner) -> None:
    lists = TodoListService(db)
    tasks = TaskService(db)
    created = await _make_list(lists, owner.id, "Doomed")
    due = datetime.now(timezone.utc) + timedelta(days=1)
    for title in ("Task one", "Task two"):
        await tasks.create(created.id, TaskCreate(title=title, due_date=due), owner.id)

    result = await lists.delete(created.id, owner.id)

    assert result.success is True
    with pytest.raises(NotFound):
        await lists.get_by_id(created.id, owner.id)
    remaining = (
        await db.execute(select(func.count()).select_from(Task).where(Task.todo_list_id == created.id))
    ).scalar_one()
    assert remaining == 0


async def test_detail_lists_only_live_tasks_with_timeline(db, owner) -> None:
    lists = TodoListService(db)
    tasks = TaskService(db)
    created = await _make_list(lists, owner.id, "Sprint")
    now = datetime.now(timezone.utc)
    soon = await tasks.create(created.id, TaskCreate(title="Urgent fix", due_date=now + timedelta(hours=2)), owner.id)
    later = await tasks.create(created.id, TaskCreate(title="Roadmap", due_date=now + timedelta(days=10)), owner.id)
    gone = await tasks.create(created.id, TaskCreate(title="Obsolete", due_date=now + timedelta(days=1)), owner.id)
    await tasks.delete(gone.id, owner.id)

    detail = await lists.get_by_id(created.id, owner.id)

    assert [task.id for task in detail.tasks] == [soon.id, later.id]
    assert [task.timeline_status for task in detail.tasks] == ["red", "green"]
