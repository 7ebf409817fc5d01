"""
Field rules for users and tasks.

Everything here is a pure function over plain values: ``validate_*`` returns a
mapping of field name to messages (empty when valid) and ``clean_*`` /
``normalize_task`` prepare values before they are persisted.
"""
import re
from datetime import date, datetime

from tasktracker.models.task import TASK_STATUSES

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 6

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
PRIORITY_MIN = 1
PRIORITY_MAX = 5
DEFAULT_PRIORITY = 3
DEFAULT_STATUS = 'pending'
MAX_TAGS = 10
TAG_MAX_LENGTH = 50

EMAIL_PATTERN = re.compile(r'^\w+([.-]\w+)*@\w+([.-]\w+)*\.\w{2,3}$')


def normalize_email(email):
    return (email or '').strip().lower()


def validate_registration(name, email, password, confirm_password=None):
    errors = {}
    name = (name or '').strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        errors.setdefault('name', []).append(
            f'Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters')

    email = normalize_email(email)
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        errors.setdefault('email', []).append('Please provide a valid email')

    password = password or ''
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.setdefault('password', []).append(
            f'Password must be at least {PASSWORD_MIN_LENGTH} characters long')
    if not any(ch.isdigit() for ch in password):
        errors.setdefault('password', []).append('Password must contain at least one number')

    if confirm_password is not None and confirm_password != password:
        errors.setdefault('confirm_password', []).append('Passwords do not match')
    return errors


def parse_tags(value):
    """Accept a comma separated string or an iterable; trim, drop blanks and repeats"""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(',')
    tags = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_priority(value):
    """Return the priority as an int, or None when it is not a whole number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def clean_task_fields(data):
    """Trim and coerce raw task input; missing keys get their defaults"""
    due_date = data.get('due_date')
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    elif isinstance(due_date, str):
        due_date = due_date.strip() or None
        if due_date is not None:
            try:
                due_date = date.fromisoformat(due_date[:10])
            except ValueError:
                pass

    priority = data.get('priority')
    return {
        'title': (data.get('title') or '').strip(),
        'description': (data.get('description') or '').strip(),
        'status': (data.get('status') or DEFAULT_STATUS).strip().lower(),
        'priority': DEFAULT_PRIORITY if priority in (None, '') else parse_priority(priority),
        'due_date': due_date,
        'tags': parse_tags(data.get('tags')),
    }


def validate_task(fields, today=None, current_due_date=None):
    """Check cleaned task fields.

    ``current_due_date`` is the value already stored on the task; keeping an
    existing date that has since passed is allowed, setting a new past date is not.
    """
    errors = {}
    today = today or date.today()

    title = fields.get('title', '')
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        errors.setdefault('title', []).append(
            f'Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters')

    if len(fields.get('description', '')) > DESCRIPTION_MAX_LENGTH:
        errors.setdefault('description', []).append(
            f'Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters')

    if fields.get('status') not in TASK_STATUSES:
        errors.setdefault('status', []).append('Invalid status')

    priority = fields.get('priority')
    if priority is None or not PRIORITY_MIN <= priority <= PRIORITY_MAX:
        errors.setdefault('priority', []).append(
            f'Priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}')

    due_date = fields.get('due_date')
    if due_date is not None:
        if not isinstance(due_date, date):
            errors.setdefault('due_date', []).append('Invalid date format')
        elif due_date < today and due_date != current_due_date:
            errors.setdefault('due_date', []).append('Due date must be in the future')

    tags = fields.get('tags', [])
    if len(tags) > MAX_TAGS:
        errors.setdefault('tags', []).append(f'A task cannot have more than {MAX_TAGS} tags')
    if any(len(tag) > TAG_MAX_LENGTH for tag in tags):
        errors.setdefault('tags', []).append(f'Tags cannot exceed {TAG_MAX_LENGTH} characters')
    return errors


def normalize_task(task):
    """Last step before a task is written: re-derive computed fields"""
    task.title = (task.title or '').strip()
    task.description = (task.description or '').strip()
    task.status = (task.status or DEFAULT_STATUS).lower()
    task.is_completed = task.status == 'completed'
    return task
