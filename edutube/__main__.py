"""Run the API with uvicorn: ``python -m edutube``."""

import uvicorn

from edutube.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "edutube.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_config=None,  # structlog owns logging
    )


if __name__ == "__main__":
    main()
