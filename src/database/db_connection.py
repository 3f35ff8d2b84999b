# database/db_connection.py

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import registry
from sqlalchemy.pool import StaticPool

from utils.logging_factory import get_logger

logger = get_logger(__name__)

# Registry compartilhado pelos mapeamentos imperativos (fornecedores, usuários)
mapper_registry = registry()
metadata = mapper_registry.metadata

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


# =====================================================
# ⚙️ Inicialização / encerramento
# =====================================================
async def init_database(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Cria o engine assíncrono e a fábrica de sessões do processo.
    Bancos SQLite em memória compartilham uma única conexão (StaticPool),
    senão cada sessão enxergaria um banco vazio.
    """
    global _engine, _session_factory

    if _engine is not None:
        await fechar_conexao()

    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    _engine = create_async_engine(database_url, **kwargs)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    logger.info(f"✅ Engine de banco inicializado ({_engine.url.get_backend_name()}).")
    return _engine


async def fechar_conexao() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("🔒 Engine de banco encerrado.")
    _engine = None
    _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Banco de dados não inicializado. Chame init_database() antes.")
    return _engine


async def criar_tabelas() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(metadata.create_all)


async def remover_tabelas() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(metadata.drop_all)


# =====================================================
# 🧱 Sessões
# =====================================================
@asynccontextmanager
async def sessao_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Abre uma sessão avulsa (CLI, scripts).
    Exemplo:
        async with sessao_context() as session:
            repo = AuthRepository(session)
    """
    if _session_factory is None:
        raise RuntimeError("Banco de dados não inicializado. Chame init_database() antes.")

    async with _session_factory() as session:
        yield session


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency do FastAPI: uma sessão por requisição."""
    async with sessao_context() as session:
        yield session
