from typing import List, Protocol, Sequence

from hook_scheduler.domain.job import Job


class JobStore(Protocol):
    async def load(self) -> List[Job]:
        """Read every persisted job definition. Raise StoreCorruptError if unreadable."""
        ...

    async def save(self, jobs: Sequence[Job]) -> None:
        """Overwrite the persisted state with a full snapshot. Raise StoreWriteError on failure."""
        ...
