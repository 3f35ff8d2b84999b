# tests/test_manage_users.py

from authentication import manage_users
from authentication.application.auth_service import AuthService
from authentication.infrastructure.auth_repository import AuthRepository
from database.db_connection import sessao_context
from minimal_api.config import settings


async def test_criar_usuario_com_claim(db):
    usuario_id = await manage_users.criar_usuario(
        "admin@exemplo.com", "Senha@123", ["ManterFornecedor", "Setor=Compras"]
    )

    async with sessao_context() as session:
        claims = await AuthRepository(session).listar_claims(usuario_id)
    assert [(c.tipo, c.valor) for c in claims] == [
        ("ManterFornecedor", "ManterFornecedor"),
        ("Setor", "Compras"),
    ]


async def test_adicionar_claim_e_role(db):
    await manage_users.criar_usuario("op@exemplo.com", "Senha@123")
    await manage_users.adicionar_claim("op@exemplo.com", "ManterFornecedor")
    await manage_users.adicionar_role("op@exemplo.com", "Operador")

    async with sessao_context() as session:
        service = AuthService(AuthRepository(session))
        resposta = await service.login("op@exemplo.com", "Senha@123")
    assert {"tipo": "ManterFornecedor", "valor": "ManterFornecedor"} in resposta["usuario"]["claims"]
    assert {"tipo": "role", "valor": "Operador"} in resposta["usuario"]["claims"]


def test_parser_exige_subcomando(capsys):
    assert manage_users.main([]) == 1
    assert "create-user" in capsys.readouterr().out


def test_main_create_user_em_banco_em_memoria(monkeypatch, capsys):
    monkeypatch.setattr(settings, "DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    codigo = manage_users.main([
        "create-user", "--email", "cli@exemplo.com", "--senha", "Senha@123",
        "--claim", "ManterFornecedor",
    ])

    assert codigo == 0
    assert "✅ Usuário cli@exemplo.com criado com sucesso" in capsys.readouterr().out


def test_main_fluxo_completo_e_erros(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")

    assert manage_users.main(["create-user", "--email", "fluxo@exemplo.com", "--senha", "Senha@123"]) == 0
    assert manage_users.main(["add-claim", "--email", "fluxo@exemplo.com", "--tipo", "ManterFornecedor"]) == 0
    assert manage_users.main(["add-role", "--email", "fluxo@exemplo.com", "--role", "Admin"]) == 0
    capsys.readouterr()

    assert manage_users.main(["create-user", "--email", "fluxo@exemplo.com", "--senha", "Senha@123"]) == 1
    assert "DuplicateUserName" in capsys.readouterr().out

    assert manage_users.main(["create-user", "--email", "fraca@exemplo.com", "--senha", "abc"]) == 1
    assert "PasswordTooShort" in capsys.readouterr().out

    assert manage_users.main(["add-claim", "--email", "fantasma@exemplo.com", "--tipo", "X"]) == 1
    assert "❌" in capsys.readouterr().out


def test_main_respeita_criar_tabelas_desligado(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    assert manage_users.main(["create-user", "--email", "tab@exemplo.com", "--senha", "Senha@123"]) == 0

    chamadas = []

    async def criar_tabelas_espiao():
        chamadas.append(True)

    monkeypatch.setattr(settings, "CRIAR_TABELAS", False)
    monkeypatch.setattr(manage_users, "criar_tabelas", criar_tabelas_espiao)

    assert manage_users.main(["add-role", "--email", "tab@exemplo.com", "--role", "Admin"]) == 0
    assert chamadas == []
