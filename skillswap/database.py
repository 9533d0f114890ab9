from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from skillswap.config import settings
from skillswap.services.ws_updates import updates_hub

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,  # log SQL
)

if engine.dialect.name == "sqlite":
    # SQLite ignores foreign keys (and ON DELETE CASCADE) unless asked per connection
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_fks(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Session factory for dependency injection
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db():
    """One session per request: commit when the handler returns, roll back on any error.

    WebSocket hints queued during the request go out only after a successful commit.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            updates_hub.discard_deferred(session)
            raise
        else:
            await updates_hub.flush_deferred(session)
        finally:
            await session.close()
