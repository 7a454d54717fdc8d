"""
JSON file store used by the repositories.

Each file holds one JSON array. Writes go to a temp file in the same
directory and are renamed over the target, so a reader sees either the
old content or the new content, never a half-written file. There is no
locking: two requests racing on the same file means last writer wins.
"""
import copy
import json
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from .errors import StorageError, StorageWriteError

logger = logging.getLogger(__name__)


class JsonStore:

    def read(self, path, default, parse=None):
        """Return the decoded content of ``path``, passed through ``parse`` if given.

        A file that is not valid JSON, or that ``parse`` rejects with
        TypeError/KeyError/ValueError, is backed up and replaced by ``default``.
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("Creating %s with default content", path)
            self.write(path, default)
            return self._decoded(default, parse)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return self._reseed(path, default, parse, e)
        except OSError as e:
            raise StorageError(f"Failed to read JSON file {path}: {e}") from e

        if parse is None:
            return data
        try:
            return parse(data)
        except (TypeError, KeyError, ValueError) as e:
            return self._reseed(path, default, parse, e)

    def write(self, path, data):
        path = Path(path)
        tmp = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp is not None:
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
            logger.error("Failed to write %s: %s", path, e)
            raise StorageWriteError(f"Failed to write JSON file {path}: {e}") from e

    def _reseed(self, path, default, parse, error):
        logger.error("Corrupted JSON file %s: %s", path, error)
        self._backup(path)
        self.write(path, default)
        return self._decoded(default, parse)

    @staticmethod
    def _decoded(default, parse):
        data = copy.deepcopy(default)
        return parse(data) if parse is not None else data

    @staticmethod
    def _backup(path):
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        backup = path.with_name(f"{path.name}.backup-{stamp}")
        try:
            shutil.copyfile(path, backup)
            logger.warning("Created backup of corrupted file: %s", backup)
        except OSError:
            # the reseed below still goes ahead
            logger.exception("Failed to create backup for %s", path)
