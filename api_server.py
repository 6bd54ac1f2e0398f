"""Convenience entry point for the Advisor Match API server."""

import uvicorn

from advisor_match.api.main import create_app
from advisor_match.config.settings import Settings


def main():
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()
