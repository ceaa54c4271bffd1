import uvicorn

from .config import get_settings
from .logger import logger


def main() -> None:
    settings = get_settings()
    logger.info(f"MediaFire Downloader API running at http://localhost:{settings.port} (render mode: {settings.render_mode})")
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
