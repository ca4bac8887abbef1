"""Task service: CRUD, completion toggling and page summaries."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from crm.core.enums import ActivityType, TaskStatus, normalize_task_status
from crm.core.exceptions import NotFoundError
from crm.engines.analytics import task_summary
from crm.schemas.analytics import TaskSummary
from crm.schemas.entities import Task
from crm.services.activity_service import ActivityService
from crm.store.base import EntityType, RecordStore
from crm.utils.validators import coerce_choice


class TaskService:
    def __init__(self, store: RecordStore, activities: ActivityService | None = None) -> None:
        self.store = store
        self.activities = activities or ActivityService(store)

    def create_task(self, fields: Mapping[str, Any]) -> Task:
        task = self.store.create(EntityType.TASK, fields)
        self.activities.log(ActivityType.TASK_CREATED, f"Task '{task.title}' created", contact_id=task.contact_id)
        return task

    def toggle_complete(self, task_id: int) -> Task:
        """Flip a task between completed and to-do."""
        task = self.store.get(EntityType.TASK, task_id)
        if task is None:
            raise NotFoundError(f"Task not found: {task_id}")

        status = TaskStatus.TO_DO if task.is_completed else TaskStatus.COMPLETED
        updated = self.store.update(EntityType.TASK, task.id, {"status": status})
        if updated.is_completed:
            self.activities.log(
                ActivityType.TASK_COMPLETED, f"Task '{updated.title}' completed", contact_id=updated.contact_id
            )
        return updated

    def list_tasks(self, status: TaskStatus | str | None = None, query: str = "") -> list[Task]:
        """Tasks matching `status` and a title/description search, soonest due first."""
        wanted = coerce_choice(normalize_task_status, status) if status else None
        needle = query.strip().lower()
        tasks = [
            t
            for t in self.store.list(EntityType.TASK)
            if (wanted is None or t.status is wanted) and needle in f"{t.title} {t.description}".lower()
        ]
        return sorted(tasks, key=lambda t: t.due_date)

    def summary(self, now: datetime | None = None) -> TaskSummary:
        return task_summary(self.store.list(EntityType.TASK), now)

    def delete_task(self, task_id: int) -> bool:
        return self.store.delete(EntityType.TASK, task_id)
