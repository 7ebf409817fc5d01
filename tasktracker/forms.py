from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, DateField
from wtforms.validators import DataRequired, Optional, Length

from tasktracker.validation import (
    TITLE_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    PRIORITY_MIN,
    PRIORITY_MAX,
    DEFAULT_PRIORITY,
)

STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('in-progress', 'In Progress'),
    ('completed', 'Completed')
]

PRIORITY_CHOICES = [
    (1, '1 - Lowest'),
    (2, '2 - Low'),
    (3, '3 - Medium'),
    (4, '4 - High'),
    (5, '5 - Highest')
]


class TaskForm(FlaskForm):
    """Form for creating/editing tasks"""
    title = StringField('Title', filters=[lambda v: v.strip() if v else v], validators=[
        DataRequired(message='Title is required'),
        Length(min=TITLE_MIN_LENGTH, max=TITLE_MAX_LENGTH,
               message=f'Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters')
    ])
    description = TextAreaField('Description', validators=[
        Optional(),
        Length(max=DESCRIPTION_MAX_LENGTH,
               message=f'Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters')
    ], render_kw={"rows": 4})
    status = SelectField('Status', choices=STATUS_CHOICES, default='pending',
                         validate_choice=True, validators=[DataRequired(message='Invalid status')])
    priority = SelectField('Priority', choices=PRIORITY_CHOICES, coerce=int, default=DEFAULT_PRIORITY,
                           validators=[DataRequired(message=f'Priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}')])
    due_date = DateField('Due Date', validators=[Optional()], format='%Y-%m-%d')
    tags = StringField('Tags (comma separated)', validators=[Optional()])

    def task_data(self):
        return {
            'title': self.title.data,
            'description': self.description.data,
            'status': self.status.data,
            'priority': self.priority.data,
            'due_date': self.due_date.data,
            'tags': self.tags.data,
        }

    @classmethod
    def for_task(cls, task):
        form = cls(obj=task)
        form.tags.data = ', '.join(task.tags)
        return form

    def add_errors(self, errors):
        """Attach errors raised by the store to the matching fields"""
        for name, messages in errors.items():
            field = getattr(self, name, None)
            if field is None:
                self.form_errors.extend(messages)
            else:
                field.errors = list(field.errors) + list(messages)
