"""
Task store: create, read, update and delete tasks on behalf of their owner.
"""
import logging
from dataclasses import dataclass, field
from datetime import date

from flask import current_app
from sqlalchemy import func, select

from tasktracker import db
from tasktracker.auth.guard import require_ownership
from tasktracker.errors import ValidationError, store_operation
from tasktracker.models import Task, TaskTag, TASK_STATUSES
from tasktracker.query import TaskFilters, compose
from tasktracker.validation import clean_task_fields, validate_task, normalize_task

logger = logging.getLogger(__name__)


@dataclass
class TaskListing:
    """Everything the task list page shows"""
    tasks: list
    filters: TaskFilters
    by_status: dict = field(default_factory=dict)
    status_counts: dict = field(default_factory=dict)
    tags: list = field(default_factory=list)

    @property
    def total(self):
        return sum(self.status_counts.values())


class TaskStore:

    def get_owned(self, owner, task_id):
        return require_ownership(owner, task_id)

    def list_for_owner(self, owner_id, filters=None):
        filters = filters or TaskFilters()
        with store_operation('listing tasks'):
            tasks = list(db.session.execute(compose(owner_id, filters)).scalars())
            counts = dict(db.session.execute(
                select(Task.status, func.count(Task.id))
                .where(Task.user_id == owner_id)
                .group_by(Task.status)
            ).all())
            tags = list(db.session.execute(
                select(TaskTag.name)
                .join(Task, TaskTag.task_id == Task.id)
                .where(Task.user_id == owner_id)
                .distinct()
                .order_by(TaskTag.name)
            ).scalars())

        return TaskListing(
            tasks=tasks,
            filters=filters,
            by_status={status: [t for t in tasks if t.status == status] for status in TASK_STATUSES},
            status_counts={status: counts.get(status, 0) for status in TASK_STATUSES},
            tags=tags,
        )

    def create(self, owner, data, today=None):
        fields = self._checked_fields(data, today)
        task = Task(user_id=owner.id)
        self._apply(task, fields)
        with store_operation('creating task'):
            db.session.add(task)
            db.session.commit()
        logger.info('User %s created task %s', owner.id, task.id)
        return task

    def update(self, owner, task_id, data, today=None):
        task = require_ownership(owner, task_id)
        fields = self._checked_fields(data, today, current_due_date=task.due_date)
        self._apply(task, fields)
        with store_operation('updating task'):
            db.session.commit()
        logger.info('User %s updated task %s', owner.id, task.id)
        return task

    def delete(self, owner, task_id):
        task = require_ownership(owner, task_id)
        with store_operation('deleting task'):
            db.session.delete(task)
            db.session.commit()
        logger.info('User %s deleted task %s', owner.id, task_id)

    @staticmethod
    def _checked_fields(data, today=None, current_due_date=None):
        fields = clean_task_fields(data)
        errors = validate_task(fields, today=today or date.today(), current_due_date=current_due_date)
        if errors:
            raise ValidationError(errors)
        return fields

    @staticmethod
    def _apply(task, fields):
        task.title = fields['title']
        task.description = fields['description']
        task.status = fields['status']
        task.priority = fields['priority']
        task.due_date = fields['due_date']
        task.set_tags(fields['tags'])
        normalize_task(task)


def get_task_store():
    return current_app.extensions['task_store']
