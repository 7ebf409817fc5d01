from datetime import date, timedelta

import pytest

from tasktracker import db
from tasktracker.errors import TASK_ACCESS_MESSAGE, StoreUnavailable
from tasktracker.models import Task

from tests.conftest import register

TOMORROW = (date.today() + timedelta(days=1)).isoformat()


def create_task(client, **data):
    payload = {'title': 'Buy milk', 'description': '', 'priority': '3',
               'status': 'pending', 'due_date': '', 'tags': ''}
    payload.update(data)
    return client.post('/tasks', data=payload)


def task_id(app, title):
    with app.app_context():
        return Task.query.filter_by(title=title).one().id


@pytest.fixture()
def alice_client(client):
    register(client)
    return client


@pytest.fixture()
def bob_client(app):
    client = app.test_client()
    register(client, name='Bob', email='bob@example.com', password='secret42')
    return client


def test_task_pages_require_login(client):
    for url in ['/tasks', '/tasks/new', '/tasks/edit/1']:
        response = client.get(url)
        assert response.status_code == 302
        assert response.headers['Location'] == '/auth/login'
    assert client.post('/tasks/delete/1').headers['Location'] == '/auth/login'


def test_create_and_list(alice_client):
    assert alice_client.get('/tasks/new').status_code == 200

    response = create_task(alice_client, tags='home, errands', due_date=TOMORROW)
    assert response.headers['Location'] == '/tasks'

    page = alice_client.get('/tasks').get_data(as_text=True)
    assert 'Task created successfully!' in page
    assert 'Buy milk' in page
    assert 'errands' in page


def test_create_invalid_title_keeps_input(alice_client):
    response = create_task(alice_client, title='ab', description='keep me')
    page = response.get_data(as_text=True)

    assert response.status_code == 400
    assert 'Title must be between 3 and 100 characters' in page
    assert 'keep me' in page


def test_create_rejects_past_due_date(app, alice_client):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = create_task(alice_client, due_date=yesterday)

    assert response.status_code == 400
    assert 'Due date must be in the future' in response.get_data(as_text=True)
    with app.app_context():
        assert Task.query.count() == 0


def test_create_rejects_too_many_tags(alice_client):
    response = create_task(alice_client, tags=','.join(f't{i}' for i in range(11)))
    assert response.status_code == 400
    assert 'A task cannot have more than 10 tags' in response.get_data(as_text=True)


def test_other_user_never_sees_task(alice_client, bob_client):
    create_task(alice_client)
    assert 'Buy milk' not in bob_client.get('/tasks').get_data(as_text=True)
    assert bob_client.get('/api/tasks').get_json()['tasks'] == []


def test_edit_prefills_form(app, alice_client):
    create_task(alice_client, tags='work, home')
    page = alice_client.get(f'/tasks/edit/{task_id(app, "Buy milk")}').get_data(as_text=True)

    assert 'value="Buy milk"' in page
    assert 'value="work, home"' in page


def test_update_task(app, alice_client):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')

    response = alice_client.post(f'/tasks/update/{tid}', data={
        'title': 'Buy oat milk', 'description': '', 'priority': '5',
        'status': 'completed', 'due_date': '', 'tags': 'shopping'})
    assert response.headers['Location'] == '/tasks'

    with app.app_context():
        task = db.session.get(Task, tid)
        assert task.title == 'Buy oat milk'
        assert task.is_completed is True
        assert task.tags == ['shopping']


def test_update_invalid_rerenders(app, alice_client):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')

    response = alice_client.post(f'/tasks/update/{tid}', data={
        'title': 'Buy milk', 'priority': '6', 'status': 'pending'})
    assert response.status_code == 400


@pytest.mark.parametrize('method, url', [
    ('get', '/tasks/edit/{id}'),
    ('post', '/tasks/update/{id}'),
    ('post', '/tasks/delete/{id}'),
])
def test_foreign_task_access_is_hidden(app, alice_client, bob_client, method, url):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')

    response = getattr(bob_client, method)(url.format(id=tid), data={
        'title': 'Hijacked', 'priority': '1', 'status': 'completed'})
    assert response.headers['Location'] == '/tasks'
    assert TASK_ACCESS_MESSAGE in bob_client.get('/tasks').get_data(as_text=True)

    with app.app_context():
        task = db.session.get(Task, tid)
        assert task.title == 'Buy milk'
        assert task.status == 'pending'


def test_delete_then_delete_again(app, alice_client, bob_client):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')

    assert alice_client.post(f'/tasks/delete/{tid}').headers['Location'] == '/tasks'
    assert 'Task deleted successfully!' in alice_client.get('/tasks').get_data(as_text=True)

    outcomes = []
    for client, target in [(alice_client, tid), (alice_client, 99999), (bob_client, tid)]:
        response = client.post(f'/tasks/delete/{target}')
        outcomes.append((response.status_code, response.headers['Location'],
                         TASK_ACCESS_MESSAGE in client.get('/tasks').get_data(as_text=True)))
    assert outcomes == [(302, '/tasks', True)] * 3


def test_filter_and_sort_through_query_string(alice_client):
    for title, priority, status in [('Alpha task', '2', 'completed'), ('Bravo task', '5', 'completed'),
                                    ('Charlie task', '4', 'pending'), ('Delta task', '1', 'in-progress'),
                                    ('Echo task', '3', 'completed')]:
        create_task(alice_client, title=title, priority=priority, status=status)

    data = alice_client.get('/api/tasks?status=completed&sort=priority-high').get_json()
    assert [t['title'] for t in data['tasks']] == ['Bravo task', 'Echo task', 'Alpha task']
    assert data['status_counts'] == {'pending': 1, 'in-progress': 1, 'completed': 3}

    page = alice_client.get('/tasks?search=charlie&status=bogus&priority=0').get_data(as_text=True)
    assert 'Charlie task' in page
    assert 'Bravo task' not in page


def test_unknown_page_uses_error_template(client):
    response = client.get('/no/such/page')
    assert response.status_code == 404
    assert 'Page Not Found' in response.get_data(as_text=True)


def test_unexpected_errors_render_generic_page(app):
    def boom():
        raise RuntimeError('kaboom')
    app.add_url_rule('/boom', 'boom', boom)
    app.config['SHOW_ERROR_DETAILS'] = False

    response = app.test_client().get('/boom')
    page = response.get_data(as_text=True)
    assert response.status_code == 500
    assert 'Something went wrong' in page
    assert 'kaboom' not in page


def flashed_on(client, url):
    return client.get(url).get_data(as_text=True)


def test_edit_page_lookup_failure_flashes_and_redirects(app, alice_client, break_task_lookup):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')
    break_task_lookup()

    response = alice_client.get(f'/tasks/edit/{tid}')
    assert response.status_code == 302
    assert response.headers['Location'] == '/tasks'
    assert 'Unable to load task for editing.' in flashed_on(alice_client, '/tasks')


def test_update_lookup_failure_flashes_and_redirects(app, alice_client, break_task_lookup):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')
    break_task_lookup()

    response = alice_client.post(f'/tasks/update/{tid}', data={
        'title': 'Buy oat milk', 'priority': '3', 'status': 'pending'})
    assert response.status_code == 302
    assert response.headers['Location'] == '/tasks'
    assert 'Unable to load task. Please try again.' in flashed_on(alice_client, '/tasks')


def test_create_commit_failure_keeps_nothing(app, alice_client, break_next_commit):
    break_next_commit()

    response = create_task(alice_client)
    assert response.headers['Location'] == '/tasks/new'
    assert 'Unable to create task. Please try again.' in flashed_on(alice_client, '/tasks/new')
    with app.app_context():
        assert Task.query.count() == 0


def test_update_commit_failure_leaves_task_unchanged(app, alice_client, break_next_commit):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')
    break_next_commit()

    response = alice_client.post(f'/tasks/update/{tid}', data={
        'title': 'Buy oat milk', 'description': '', 'priority': '5',
        'status': 'completed', 'due_date': '', 'tags': ''})
    assert response.headers['Location'] == '/tasks'
    assert 'Unable to update task. Please try again.' in flashed_on(alice_client, '/tasks')
    with app.app_context():
        task = db.session.get(Task, tid)
        assert task.title == 'Buy milk'
        assert task.is_completed is False


def test_delete_commit_failure_keeps_task(app, alice_client, break_next_commit):
    create_task(alice_client)
    tid = task_id(app, 'Buy milk')
    break_next_commit()

    response = alice_client.post(f'/tasks/delete/{tid}')
    assert response.headers['Location'] == '/tasks'
    assert 'Unable to delete task. Please try again.' in flashed_on(alice_client, '/tasks')
    with app.app_context():
        assert db.session.get(Task, tid) is not None


def test_list_failure_renders_unavailable_page(app, alice_client, monkeypatch):
    def unavailable(owner_id, filters=None):
        raise StoreUnavailable()
    monkeypatch.setattr(app.extensions['task_store'], 'list_for_owner', unavailable)

    response = alice_client.get('/tasks')
    assert response.status_code == 503
    assert 'Unable to fetch tasks. Please try again.' in response.get_data(as_text=True)

    response = alice_client.get('/api/tasks')
    assert response.status_code == 503
    assert response.get_json() == {'error': 'Unable to fetch tasks', 'data': None}
