from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from .config import Settings, get_settings


logger = logging.getLogger(__name__)


def build_sqlalchemy_url(settings: Settings) -> URL:
    # URL.create escapes passwords with special characters for us.
    query = {"sslmode": settings.sslmode} if settings.sslmode else {}
    return URL.create(
        settings.driver,
        username=settings.db_user or None,
        password=settings.db_password or None,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name or None,
        query=query,
    )


def get_engine(settings: Settings | None = None) -> Engine:
    if settings is None:
        settings = get_settings()
    url = build_sqlalchemy_url(settings)

    logger.info(
        "[DB] create engine host=%s port=%s db=%s user=%s driver=%s sslmode=%s",
        settings.db_host,
        settings.db_port,
        settings.db_name,
        settings.db_user,
        settings.driver,
        settings.sslmode,
    )

    # Engine creation is lazy; connection errors surface on first connect().
    return create_engine(url, pool_pre_ping=True, future=True)
