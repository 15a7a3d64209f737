import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import quote_plus

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from clinic_backoffice.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Configuración
settings = get_settings()


def get_async_database_url(config: Settings | None = None) -> str:
    """Construye la URL de la base de datos asíncrona"""
    config = config or settings
    host = config.DB_HOST or "localhost"
    port = config.DB_PORT or 5432
    user = config.DB_USER or "postgres"
    database = config.DB_NAME
    password = config.DB_PASSWORD

    # Validar database name (obligatorio)
    if not database:
        raise ValueError("Database name is required (DB_NAME)")

    # Escapar caracteres especiales en credenciales
    encoded_user = quote_plus(user)

    if password:
        encoded_password = quote_plus(password)
        return f"postgresql+asyncpg://{encoded_user}:{encoded_password}@{host}:{port}/{database}"
    return f"postgresql+asyncpg://{encoded_user}@{host}:{port}/{database}"


def create_async_database_engine(config: Settings | None = None) -> AsyncEngine:
    """Crea el engine de base de datos asíncrono"""
    config = config or settings
    try:
        database_url = get_async_database_url(config)

        base_config = {
            "echo": config.DB_ECHO,
            "pool_pre_ping": True,
        }

        if config.DEBUG or config.is_test:
            # Para desarrollo y tests: sin pooling
            logger.info("Creating async database engine without pooling (NullPool)")
            engine_config = {**base_config, "poolclass": NullPool}
        else:
            # create_async_engine uses AsyncAdaptedQueuePool by default
            logger.info("Creating async database engine with connection pool")
            engine_config = {
                **base_config,
                "pool_size": config.DB_POOL_SIZE,
                "max_overflow": config.DB_MAX_OVERFLOW,
                "pool_recycle": config.DB_POOL_RECYCLE,
                "pool_timeout": config.DB_POOL_TIMEOUT,
            }

        return create_async_engine(database_url, **engine_config)

    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


# Crear el engine asíncrono (no conecta hasta el primer uso)
async_engine = create_async_database_engine()

# Session maker asíncrono
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency para obtener la sesión de base de datos asíncrona
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise


@asynccontextmanager
async def get_async_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager para operaciones de base de datos asíncronas
    (scheduler de recordatorios y otros procesos en background)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise


async def check_db_connection() -> bool:
    """Verifica la conexión a la base de datos"""
    try:
        async with AsyncSessionLocal() as session:
            result = (await session.execute(text("SELECT 1"))).scalar()
            logger.info(f"Database connection check: OK = {result}")
            return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False
