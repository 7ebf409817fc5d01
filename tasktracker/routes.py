from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify
from flask_login import current_user

from tasktracker.auth.guard import login_required
from tasktracker.errors import TaskAccessDenied, StoreUnavailable, ValidationError
from tasktracker.forms import TaskForm, STATUS_CHOICES, PRIORITY_CHOICES
from tasktracker.query import TaskFilters, SORT_CHOICES
from tasktracker.store import get_task_store

bp = Blueprint('main', __name__)


@bp.errorhandler(TaskAccessDenied)
def handle_task_access_denied(error):
    """Missing and foreign tasks look the same to the user"""
    flash(str(error), 'error')
    return redirect(url_for('main.tasks'))


@bp.errorhandler(StoreUnavailable)
def handle_store_unavailable(error):
    """Database failures the view did not recover from itself.

    The list page and the landing page are where a redirect would end up, so
    those render the error page instead of looping.
    """
    if request.endpoint == 'main.api_tasks':
        return jsonify({'error': 'Unable to fetch tasks', 'data': None}), 503
    if request.endpoint in ('main.tasks', 'main.index'):
        return render_template('error.html', status=503,
                               message='Unable to fetch tasks. Please try again.',
                               details=None), 503
    flash('Unable to load task. Please try again.', 'error')
    return redirect(url_for('main.tasks'))


@bp.route('/')
def index():
    """Landing page; logged-in users go straight to their tasks"""
    if current_user.is_authenticated:
        return redirect(url_for('main.tasks'))
    logged_out = request.args.get('loggedOut') == 'true'
    return render_template('index.html', logged_out=logged_out)


@bp.route('/tasks')
@login_required
def tasks():
    """Task list with search, filter and sort"""
    filters = TaskFilters.from_args(request.args)
    listing = get_task_store().list_for_owner(current_user.id, filters)
    return render_template('tasks/index.html',
                           listing=listing,
                           filters=filters,
                           status_choices=STATUS_CHOICES,
                           priority_choices=PRIORITY_CHOICES,
                           sort_choices=SORT_CHOICES)


@bp.route('/tasks/new')
@login_required
def new_task():
    """Empty task form"""
    return render_template('tasks/new.html', form=TaskForm())


@bp.route('/tasks', methods=['POST'])
@login_required
def create_task():
    """Create a new task"""
    form = TaskForm()
    if not form.validate_on_submit():
        return render_template('tasks/new.html', form=form), 400
    try:
        get_task_store().create(current_user, form.task_data())
    except ValidationError as e:
        form.add_errors(e.errors)
        return render_template('tasks/new.html', form=form), 400
    except StoreUnavailable:
        flash('Unable to create task. Please try again.', 'error')
        return redirect(url_for('main.new_task'))
    flash('Task created successfully!', 'success')
    return redirect(url_for('main.tasks'))


@bp.route('/tasks/edit/<int:task_id>')
@login_required
def edit_task(task_id):
    """Edit form for a task the user owns"""
    try:
        task = get_task_store().get_owned(current_user, task_id)
    except StoreUnavailable:
        flash('Unable to load task for editing.', 'error')
        return redirect(url_for('main.tasks'))
    return render_template('tasks/edit.html', form=TaskForm.for_task(task), task=task)


@bp.route('/tasks/update/<int:task_id>', methods=['POST'])
@login_required
def update_task(task_id):
    """Update an existing task"""
    store = get_task_store()
    task = store.get_owned(current_user, task_id)
    form = TaskForm()
    if not form.validate_on_submit():
        return render_template('tasks/edit.html', form=form, task=task), 400
    try:
        store.update(current_user, task_id, form.task_data())
    except ValidationError as e:
        form.add_errors(e.errors)
        return render_template('tasks/edit.html', form=form, task=task), 400
    except StoreUnavailable:
        flash('Unable to update task. Please try again.', 'error')
        return redirect(url_for('main.tasks'))
    flash('Task updated successfully!', 'success')
    return redirect(url_for('main.tasks'))


@bp.route('/tasks/delete/<int:task_id>', methods=['POST'])
@login_required
def delete_task(task_id):
    """Delete a task"""
    try:
        get_task_store().delete(current_user, task_id)
    except StoreUnavailable:
        flash('Unable to delete task. Please try again.', 'error')
        return redirect(url_for('main.tasks'))
    flash('Task deleted successfully!', 'success')
    return redirect(url_for('main.tasks'))


# API Routes
@bp.route('/api/tasks')
@login_required
def api_tasks():
    """JSON view of the same filtered list"""
    listing = get_task_store().list_for_owner(current_user.id, TaskFilters.from_args(request.args))
    return jsonify({
        'tasks': [task.to_dict() for task in listing.tasks],
        'status_counts': listing.status_counts,
        'tags': listing.tags,
    })
