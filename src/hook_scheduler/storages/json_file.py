import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from hook_scheduler.domain.job import Job
from hook_scheduler.errors import StoreCorruptError, StoreWriteError
from hook_scheduler.storages.protocol import JobStore

logger = logging.getLogger(__name__)


def _serialize(jobs: Sequence[Job]) -> str:
    try:
        return json.dumps([job.public_dict() for job in jobs], indent=2)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise StoreWriteError(f"Cannot serialize jobs: {e}") from e


def _deserialize(raw: str, source: str) -> List[Job]:
    try:
        records = json.loads(raw) if raw.strip() else []
    except json.JSONDecodeError as e:
        raise StoreCorruptError(f"{source} is not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise StoreCorruptError(f"{source} must contain a JSON array of jobs")

    jobs: List[Job] = []
    for index, record in enumerate(records):
        try:
            jobs.append(Job.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping unreadable job record #%d in %s: %s", index, source, e)
    return jobs


class JsonFileStore(JobStore):
    """
    Persists job definitions as a pretty-printed JSON array in a single file.

    Every save is a complete snapshot written to a temporary file next to the
    target and renamed over it, so readers never see a partial file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path: Path = Path(path)

    async def load(self) -> List[Job]:
        return await asyncio.to_thread(self._load)

    async def save(self, jobs: Sequence[Job]) -> None:
        await asyncio.to_thread(self._write, _serialize(jobs))

    def _load(self) -> List[Job]:
        if not self.path.exists():
            logger.info("Job store %s does not exist, creating an empty one", self.path)
            self._write(_serialize([]))
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreCorruptError(f"Cannot read {self.path}: {e}") from e
        return _deserialize(raw, str(self.path))

    def _write(self, content: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreWriteError(f"Cannot write {self.path}: {e}") from e


class InMemoryStore(JobStore):
    """
    Keeps the last saved snapshot in memory. Useful for tests and embedding.
    """

    def __init__(self, records: Sequence[Dict[str, Any]] = ()):
        self.snapshot: str = json.dumps(list(records), indent=2)
        self.save_count: int = 0

    async def load(self) -> List[Job]:
        return _deserialize(self.snapshot, "in-memory store")

    async def save(self, jobs: Sequence[Job]) -> None:
        self.snapshot = _serialize(jobs)
        self.save_count += 1

    @property
    def records(self) -> List[Dict[str, Any]]:
        return json.loads(self.snapshot)
