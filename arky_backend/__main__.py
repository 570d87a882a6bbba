"""Run the API with uvicorn: ``python -m arky_backend``."""

import uvicorn

from arky_backend.core.config import settings


def main() -> None:
    uvicorn.run(
        "arky_backend.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
