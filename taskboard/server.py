"""
Flask application factory for the task manager API.

- users.json : list of users { id, username, password (hash), createdAt }
- tasks.json : list of tasks { id, userId, title, description, status, createdAt, updatedAt }

Sessions are stateless JWTs; logging out is the client dropping its token.
"""
import logging
import time
from types import SimpleNamespace

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from .config import Settings
from .errors import register_error_handlers
from .models import utcnow_iso
from .routes import auth_bp, tasks_bp
from .storage import JsonStore
from .tasks import TaskRepository, default_tasks
from .tokens import TokenService
from .users import UserRepository, default_users

logger = logging.getLogger(__name__)


def initialize_storage(users, tasks):
    """Make sure both files exist; reseed a collection that is present but empty."""
    logger.info("Initializing storage...")
    existing_users = users.get_all()
    if not existing_users:
        users.store.write(users.path, default_users())
        logger.info("Default user created: defaultuser / password123")
    else:
        logger.info("Found %d existing users", len(existing_users))

    existing_tasks = tasks.get_all()
    if not existing_tasks:
        tasks.store.write(tasks.path, default_tasks())
        logger.info("Default task created")
    else:
        logger.info("Found %d existing tasks", len(existing_tasks))


def _install_request_hooks(app, settings):
    delay = settings.api_delay_ms / 1000.0 if settings.is_development else 0

    @app.before_request
    def start_request():
        g.request_started = time.perf_counter()
        if delay:
            logger.debug("Delaying %s %s by %dms", request.method, request.path, settings.api_delay_ms)
            time.sleep(delay)

    @app.after_request
    def log_request(response):
        started = g.get("request_started")
        elapsed = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        logger.info("%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed)
        return response


def create_app(settings=None):
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origins)

    store = JsonStore()
    users = UserRepository(store, settings.users_file)
    tasks = TaskRepository(store, settings.tasks_file)
    app.extensions["taskboard"] = SimpleNamespace(
        users=users,
        tasks=tasks,
        tokens=TokenService(settings.jwt_secret, settings.token_ttl),
    )

    initialize_storage(users, tasks)

    register_error_handlers(app)
    _install_request_hooks(app, settings)
    app.register_blueprint(auth_bp)
    app.register_blueprint(tasks_bp)

    @app.route("/")
    def index():
        return jsonify({"message": "Task Manager API is running!"})

    @app.route("/health")
    def health():
        return jsonify({"status": "OK", "timestamp": utcnow_iso()})

    return app
