import logging
import time
from functools import partial

from .models import User, parse_records, utcnow_iso
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

# defaultuser / password123
DEMO_PASSWORD_HASH = (
    "pbkdf2:sha256:600000$Xq7mTa2LbV9rK4cN$"
    "7c2775d2e1815afe15c00b280553075b4deef10512581d7a51e92cf772b5739b"
)


def default_users():
    return [User(id="1", username="defaultuser", password_hash=DEMO_PASSWORD_HASH,
                 created_at=utcnow_iso()).to_dict()]


class UserRepository:
    """Users persisted in a JSON array. Records are never updated or deleted."""

    def __init__(self, store, path):
        self.store = store
        self.path = path

    def _load(self):
        return self.store.read(self.path, default_users(), parse=partial(parse_records, User))

    def get_all(self):
        return self._load()

    def get_by_id(self, user_id):
        return next((u for u in self._load() if u.id == user_id), None)

    def get_by_username(self, username):
        return next((u for u in self._load() if u.username == username), None)

    def create(self, username, password):
        # uniqueness of the username is checked by the caller
        password_hash = hash_password(password)
        users = self._load()
        taken = {u.id for u in users}
        new_id = int(time.time() * 1000)
        while str(new_id) in taken:
            new_id += 1
        user = User(id=str(new_id), username=username, password_hash=password_hash)
        users.append(user)
        self.store.write(self.path, [u.to_dict() for u in users])
        logger.info("Created user id=%s username=%s", user.id, username)
        return user

    @staticmethod
    def validate_credentials(password, password_hash):
        return verify_password(password, password_hash)
