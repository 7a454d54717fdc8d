import logging
import threading
from functools import partial

from .errors import TaskboardError
from .models import Task, TaskStatus, parse_records, utcnow_iso

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "status")


def default_tasks():
    now = utcnow_iso()
    return [Task(id="1", user_id="1", title="Sample Task",
                 description="This is a sample task to get started",
                 created_at=now, updated_at=now).to_dict()]


class TaskIdCounter:
    """
    Hands out task ids for one repository.

    ``seed`` is called once, on the first ``next()``, and must return the
    first id to use. If it fails the counter starts at 1.
    """

    def __init__(self, seed):
        self._seed = seed
        self._value = None
        self._lock = threading.Lock()

    def next(self):
        with self._lock:
            if self._value is None:
                try:
                    self._value = int(self._seed())
                except (TaskboardError, OSError, ValueError, TypeError):
                    logger.exception("Could not seed task id counter, starting at 1")
                    self._value = 1
            value = self._value
            self._value += 1
        return str(value)


class TaskRepository:
    """
    Tasks persisted in a JSON array.

    Every operation reloads the whole file, changes it in memory and
    writes the whole file back. Ownership is not checked here.
    """

    def __init__(self, store, path, counter=None, clock=utcnow_iso):
        self.store = store
        self.path = path
        self.clock = clock
        self.counter = counter or TaskIdCounter(self._first_free_id)

    def _load(self):
        return self.store.read(self.path, default_tasks(), parse=partial(parse_records, Task))

    def _save(self, tasks):
        self.store.write(self.path, [t.to_dict() for t in tasks])

    def _first_free_id(self):
        numeric = [int(t.id) for t in self._load() if t.id.isdigit()]
        return max(numeric) + 1 if numeric else 1

    def get_all(self):
        return self._load()

    def get_by_user(self, user_id):
        return [t for t in self._load() if t.user_id == user_id]

    def get_by_id(self, task_id):
        return next((t for t in self._load() if t.id == task_id), None)

    def next_id(self):
        return self.counter.next()

    def create(self, task):
        tasks = self._load()
        tasks.append(task)
        self._save(tasks)
        logger.debug("Created task id=%s user=%s", task.id, task.user_id)
        return task

    def new_task(self, user_id, title, description="", status=TaskStatus.PENDING):
        now = self.clock()
        task = Task(
            id=self.next_id(),
            user_id=user_id,
            title=title,
            description=description,
            status=TaskStatus(status),
            created_at=now,
            updated_at=now,
        )
        return self.create(task)

    def update(self, task_id, **fields):
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"cannot update task fields: {', '.join(sorted(unknown))}")

        tasks = self._load()
        for task in tasks:
            if task.id != task_id:
                continue
            if "title" in fields:
                task.title = fields["title"]
            if "description" in fields:
                task.description = fields["description"]
            if "status" in fields:
                task.status = TaskStatus(fields["status"])
            task.updated_at = self.clock()
            self._save(tasks)
            return task
        return None

    def delete(self, task_id):
        tasks = self._load()
        for i, task in enumerate(tasks):
            if task.id == task_id:
                del tasks[i]
                self._save(tasks)
                logger.debug("Deleted task id=%s", task_id)
                return task
        return None
