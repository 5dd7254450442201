"""
maint_portal.api.__main__

Entrypoint for `python -m maint_portal.api` and the `maint-portal` console script.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with logging left to structlog.
"""

from __future__ import annotations

import uvicorn

from maint_portal.api.app import create_app
from maint_portal.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
