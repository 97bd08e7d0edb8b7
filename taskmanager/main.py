import uvicorn

from .app import create_app
from .config import get_settings
from .logging_setup import setup_logging
from .security import generate_secret


def serve() -> None:
    """Entry point for ``taskmanager-serve``."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


def keygen() -> None:
    """Entry point for ``taskmanager-keygen``: print a fresh signing secret."""
    print("Base64 secret key (set as TASKMANAGER_JWT_SECRET):")
    print(generate_secret())


if __name__ == "__main__":
    serve()
