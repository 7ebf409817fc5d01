"""
Models package - contains all database models
"""

from tasktracker.models.user import User
from tasktracker.models.task import Task, TaskTag, TASK_STATUSES
from tasktracker.models.session_record import SessionRecord

__all__ = ['User', 'Task', 'TaskTag', 'TASK_STATUSES', 'SessionRecord']
