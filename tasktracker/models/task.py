from datetime import date

from sqlalchemy.orm import validates

from tasktracker import db, utcnow

TASK_STATUSES = ('pending', 'in-progress', 'completed')


class Task(db.Model):
    """Task owned by exactly one user"""
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    status = db.Column(db.String(20), nullable=False, default='pending')
    priority = db.Column(db.Integer, nullable=False, default=3)
    due_date = db.Column(db.Date, nullable=True, index=True)
    is_completed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    tag_links = db.relationship(
        'TaskTag',
        backref='task',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='TaskTag.position'
    )

    __table_args__ = (
        db.Index('ix_task_user_status', 'user_id', 'status'),
    )

    @validates('user_id')
    def _freeze_owner(self, key, value):
        if self.user_id is not None and value != self.user_id:
            raise ValueError('Task owner cannot be changed')
        return value

    @property
    def tags(self):
        return [link.name for link in self.tag_links]

    def set_tags(self, names):
        """Replace the tag set, keeping the given order"""
        self.tag_links = [TaskTag(name=name, position=i) for i, name in enumerate(names)]

    def mark_completed(self):
        self.status = 'completed'
        self.is_completed = True

    def is_overdue(self, today=None):
        if not self.due_date or self.is_completed:
            return False
        return (today or date.today()) > self.due_date

    @property
    def formatted_due_date(self):
        if not self.due_date:
            return 'No due date'
        return f'{self.due_date:%b} {self.due_date.day}, {self.due_date.year}'

    def to_dict(self):
        """Convert task to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'status': self.status,
            'priority': self.priority,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'is_completed': self.is_completed,
            'tags': self.tags,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Task {self.id}: {self.title[:50]}>'


class TaskTag(db.Model):
    """One tag on a task"""
    __tablename__ = 'task_tag'
    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('task.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<TaskTag {self.task_id}: {self.name}>'
