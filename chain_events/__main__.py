"""Run the API with uvicorn: ``python -m chain_events``."""

import uvicorn

from chain_events.core.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "chain_events.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
