"""Records persisted in users.json / tasks.json."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utcnow_iso():
    return datetime.now(timezone.utc).isoformat()


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


@dataclass
class User:
    id: str
    username: str
    password_hash: str
    created_at: str = field(default_factory=utcnow_iso)

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=str(d["id"]),
            username=d["username"],
            password_hash=d.get("password", ""),
            created_at=d.get("createdAt", ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password_hash,
            "createdAt": self.created_at,
        }

    def public(self):
        # never expose the hash
        return {"id": self.id, "username": self.username, "createdAt": self.created_at}


@dataclass
class Task:
    id: str
    user_id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=str(d["id"]),
            user_id=str(d.get("userId", "")),
            title=d.get("title", ""),
            description=d.get("description") or "",
            status=TaskStatus(d.get("status", TaskStatus.PENDING.value)),
            created_at=d.get("createdAt", ""),
            updated_at=d.get("updatedAt", ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class CurrentUser:
    """Identity attached to a request once its token checks out."""
    id: str
    username: str


def parse_records(cls, data):
    """Build ``cls`` records from a decoded JSON array; anything else is rejected."""
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array, got {type(data).__name__}")
    return [cls.from_dict(d) for d in data]
