from loguru import logger

from .api import create_app
from .config import settings, setup_logging


def main() -> None:
    setup_logging(settings)
    app = create_app(settings=settings)
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port} ({settings.environment})")
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    main()
