import logging
import re

from flask import Blueprint, current_app, g, jsonify, request

from .auth import token_required
from .errors import BadRequest, Conflict, NotFound, Unauthorized
from .models import TaskStatus

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")

USERNAME_MIN, USERNAME_MAX = 3, 50
PASSWORD_MIN, PASSWORD_MAX = 6, 100
TITLE_MAX = 100
DESCRIPTION_MAX = 500
USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _services():
    return current_app.extensions["taskboard"]


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _auth_response(user, status=200):
    token = _services().tokens.issue(user.id)
    return jsonify({"token": token, "user": user.public()}), status


# ---------- validation helpers ----------
def _credentials(body):
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise BadRequest("Username and password are required")
    return username, password


def _check_new_credentials(username, password):
    if len(username) < USERNAME_MIN:
        raise BadRequest(f"Username must be at least {USERNAME_MIN} characters long")
    if len(username) > USERNAME_MAX:
        raise BadRequest(f"Username must be no more than {USERNAME_MAX} characters long")
    if not USERNAME_RE.match(username):
        raise BadRequest("Username can only contain letters, numbers, and underscores")
    if len(password) < PASSWORD_MIN:
        raise BadRequest(f"Password must be at least {PASSWORD_MIN} characters long")
    if len(password) > PASSWORD_MAX:
        raise BadRequest(f"Password must be no more than {PASSWORD_MAX} characters long")


def _title(value):
    if not isinstance(value, str) or not value.strip():
        raise BadRequest("Title is required")
    value = value.strip()
    if len(value) > TITLE_MAX:
        raise BadRequest(f"Title must be {TITLE_MAX} characters or less")
    return value


def _description(value):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest("Description must be a string")
    if len(value) > DESCRIPTION_MAX:
        raise BadRequest(f"Description must be {DESCRIPTION_MAX} characters or less")
    return value


def _status(value):
    if value not in TaskStatus.values():
        raise BadRequest(f"Status must be one of: {', '.join(TaskStatus.values())}")
    return TaskStatus(value)


def _owned_task(task_id):
    # someone else's task is reported exactly like a missing one
    task = _services().tasks.get_by_id(task_id)
    if task is None or task.user_id != g.current_user.id:
        raise NotFound("Task not found")
    return task


# ---------- auth ----------
@auth_bp.route("/register", methods=["POST"])
def register():
    username, password = _credentials(_json_body())
    _check_new_credentials(username, password)

    users = _services().users
    if users.get_by_username(username) is not None:
        raise Conflict("Username already exists")

    user = users.create(username, password)
    return _auth_response(user, 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    username, password = _credentials(_json_body())

    users = _services().users
    user = users.get_by_username(username)
    if user is None or not users.validate_credentials(password, user.password_hash):
        logger.info("Failed login for username=%s", username)
        raise Unauthorized("Invalid credentials")
    return _auth_response(user)


# ---------- tasks ----------
@tasks_bp.route("", methods=["GET"])
@token_required
def list_tasks():
    tasks = _services().tasks.get_by_user(g.current_user.id)
    return jsonify([t.to_dict() for t in tasks])


@tasks_bp.route("", methods=["POST"])
@token_required
def create_task():
    body = _json_body()
    title = _title(body.get("title"))
    description = _description(body.get("description"))
    status = _status(body.get("status", TaskStatus.PENDING.value))

    task = _services().tasks.new_task(g.current_user.id, title, description, status)
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/<task_id>", methods=["PUT"])
@token_required
def update_task(task_id):
    body = _json_body()
    _owned_task(task_id)

    fields = {}
    if "title" in body:
        fields["title"] = _title(body["title"])
    if "description" in body:
        fields["description"] = _description(body["description"])
    if "status" in body:
        fields["status"] = _status(body["status"])

    task = _services().tasks.update(task_id, **fields)
    if task is None:
        raise NotFound("Task not found")
    return jsonify(task.to_dict())


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@token_required
def delete_task(task_id):
    _owned_task(task_id)
    task = _services().tasks.delete(task_id)
    if task is None:
        raise NotFound("Task not found")
    return jsonify(task.to_dict())
