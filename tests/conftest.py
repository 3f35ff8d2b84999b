# tests/conftest.py

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from authentication.application.auth_service import AuthService
from authentication.infrastructure.auth_repository import AuthRepository
from database.db_connection import (
    criar_tabelas,
    fechar_conexao,
    init_database,
    remover_tabelas,
    sessao_context,
)
from minimal_api.main import create_app

SENHA_VALIDA = "Senha@123"


@pytest_asyncio.fixture
async def db():
    """Banco SQLite em memória, recriado a cada teste."""
    await init_database("sqlite+aiosqlite:///:memory:")
    await criar_tabelas()
    try:
        yield
    finally:
        await remover_tabelas()
        await fechar_conexao()


@pytest_asyncio.fixture
async def session(db):
    async with sessao_context() as s:
        yield s


@pytest_asyncio.fixture
async def client(db):
    # ASGITransport não dispara o lifespan: o banco vem da fixture `db`
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _registrar(email: str, claims: list[tuple[str, str]] | None = None) -> dict:
    async with sessao_context() as s:
        service = AuthService(AuthRepository(s))
        await service.registrar(email, SENHA_VALIDA)
        for tipo, valor in claims or []:
            await service.adicionar_claim(email, tipo, valor)
        usuario = await service.repo.buscar_usuario_por_email(email)
        return await service.montar_resposta(usuario)


@pytest_asyncio.fixture
async def token_leitor(db) -> str:
    resposta = await _registrar("leitor@exemplo.com")
    return resposta["access_token"]


@pytest_asyncio.fixture
async def token_gestor(db) -> str:
    resposta = await _registrar("gestor@exemplo.com", [("ManterFornecedor", "ManterFornecedor")])
    return resposta["access_token"]
