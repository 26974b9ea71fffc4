from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# Base для моделей
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
