"""CLI command for running the relay under uvicorn.

Usage:
    python -m airwave.cli.serve
"""

import uvicorn

from airwave.core.config import Settings


def main() -> None:
    """Serve the app on HOST:PORT from settings."""
    settings = Settings()  # type: ignore[call-arg]
    uvicorn.run("airwave.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
