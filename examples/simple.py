import asyncio

from hook_scheduler.config import configure_logging
from hook_scheduler.dispatchers.http import HttpDispatcher
from hook_scheduler.lifecycle import LifecycleManager
from hook_scheduler.registry import JobRegistry
from hook_scheduler.storages.json_file import JsonFileStore

# Set up the registry and its lifecycle
configure_logging("INFO")
registry = JobRegistry(JsonFileStore("./example_jobs.json"), HttpDispatcher(timeout_seconds=5))
lifecycle = LifecycleManager(registry)


async def main():
    await lifecycle.startup()

    job = await registry.create(
        name="Every five seconds",
        schedule="*/5 * * * * *",
        payload={"url": "https://httpbin.org/post", "body": {"message": "tick"}},
    )
    print(f"Job created: {job.id} ({job.schedule})")

    await asyncio.sleep(16)

    for firing in await registry.recent_firings(job.id):
        print(f"{firing.scheduled_for:%H:%M:%S} {firing.status.value} {firing.result}")

    await registry.delete(job.id)
    await lifecycle.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
