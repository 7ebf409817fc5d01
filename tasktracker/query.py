"""
Task list queries.

``TaskFilters`` holds the raw filter values from a request; ``compose`` turns
them into a SELECT that is always limited to one owner's tasks. Values that do
not make sense are ignored rather than rejected.
"""
from dataclasses import dataclass, asdict

from sqlalchemy import or_, select

from tasktracker.models import Task, TaskTag, TASK_STATUSES
from tasktracker.validation import PRIORITY_MIN, PRIORITY_MAX, parse_priority

FILTER_FIELDS = ('search', 'status', 'priority', 'tag', 'sort')

SORT_ORDERS = {
    'oldest': (Task.created_at.asc(), Task.id.asc()),
    'priority-high': (Task.priority.desc(), Task.created_at.desc(), Task.id.desc()),
    'priority-low': (Task.priority.asc(), Task.created_at.desc(), Task.id.desc()),
    # Tasks without a due date go last
    'due-soon': (Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc()),
    'title': (Task.title.asc(), Task.id.asc()),
}
NEWEST_FIRST = (Task.created_at.desc(), Task.id.desc())

SORT_CHOICES = [
    ('', 'Newest first'),
    ('oldest', 'Oldest first'),
    ('priority-high', 'Priority: high to low'),
    ('priority-low', 'Priority: low to high'),
    ('due-soon', 'Due soonest'),
    ('title', 'Title A-Z'),
]


@dataclass(frozen=True)
class TaskFilters:
    search: str = ''
    status: str = ''
    priority: str = ''
    tag: str = ''
    sort: str = ''

    @classmethod
    def from_args(cls, args):
        """Build filters from a mapping such as ``request.args``"""
        return cls(**{name: str(args.get(name) or '') for name in FILTER_FIELDS})

    def as_dict(self):
        return asdict(self)


def _escape_like(value):
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def compose(owner_id, filters):
    """Compile filters into a SELECT over the owner's tasks"""
    # The owner predicate comes first and nothing in the filters can lift it
    stmt = select(Task).where(Task.user_id == owner_id)

    search = filters.search.strip()
    if search:
        pattern = f'%{_escape_like(search)}%'
        stmt = stmt.where(or_(
            Task.title.ilike(pattern, escape='\\'),
            Task.description.ilike(pattern, escape='\\'),
        ))

    if filters.status in TASK_STATUSES:
        stmt = stmt.where(Task.status == filters.status)

    priority = parse_priority(filters.priority) if filters.priority else None
    if priority is not None and PRIORITY_MIN <= priority <= PRIORITY_MAX:
        stmt = stmt.where(Task.priority == priority)

    tag = filters.tag.strip()
    if tag:
        stmt = stmt.where(Task.tag_links.any(TaskTag.name == tag))

    return stmt.order_by(*SORT_ORDERS.get(filters.sort, NEWEST_FIRST))
