#!/usr/bin/env python3
"""Minimal changestore server."""

from __future__ import annotations

import logging

import uvicorn

from changestore.config import get_settings
from changestore.runtime import create_app


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings.database_url, create_schema=settings.create_schema)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
