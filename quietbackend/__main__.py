"""Run the API server: ``python -m quietbackend``."""

import uvicorn

from quietbackend.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "quietbackend.main:app",
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
