import uvicorn

from hook_scheduler.api import create_app
from hook_scheduler.config import Settings, configure_logging


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    # uvicorn turns SIGINT/SIGTERM into a lifespan shutdown, which flushes the store
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
