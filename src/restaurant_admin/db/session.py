from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from restaurant_admin.config import settings


def build_engine(url: str, echo: bool = False):
    """
    Асинхронный движок.
    Для in-memory SQLite нужен один общий коннект, иначе каждая сессия видит пустую базу.
    """
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith("://")):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo, future=True)


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Фабрика сессий
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_schema(bind=None) -> None:
    """Создаёт все таблицы по метаданным моделей (dev/тесты, без alembic)."""
    from restaurant_admin.db.base import Base
    import restaurant_admin.models  # noqa: F401  регистрирует модели

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Зависимость для FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Использовать в Depends(get_async_session)
    Пример: async def endpoint(db: AsyncSession = Depends(get_async_session))
    """
    async with AsyncSessionLocal() as session:
        yield session
