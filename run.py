import os

from tasktracker import create_app, db

app = create_app()

# Initialize database and start background tasks
with app.app_context():
    db.create_all()
    from tasktracker.scheduler import start_background_tasks
    start_background_tasks(app)

if __name__ == '__main__':
    # Use debug mode only if FLASK_ENV is not 'production'
    debug = os.environ.get('FLASK_ENV') != 'production'

    # The reloader would start a second scheduler in the child process
    app.run(
        debug=debug,
        host='0.0.0.0',
        port=int(os.environ.get('PORT', '8000')),
        threaded=True,
        use_reloader=False
    )
