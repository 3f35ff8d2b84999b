# authentication/manage_users.py

import argparse
import asyncio
import sys

from authentication.application.auth_service import AuthService
from authentication.domain.exceptions import RegistroInvalidoError
from authentication.infrastructure.auth_repository import AuthRepository
from database.db_connection import criar_tabelas, fechar_conexao, init_database, sessao_context
from minimal_api.config import settings


def _parse_claim(texto: str) -> tuple[str, str]:
    """'ManterFornecedor' ou 'ManterFornecedor=Gravar' -> (tipo, valor)."""
    tipo, _, valor = texto.partition("=")
    return tipo.strip(), (valor.strip() or tipo.strip())


async def criar_usuario(email: str, senha: str, claims: list[str] | None = None) -> str:
    async with sessao_context() as session:
        service = AuthService(AuthRepository(session))
        resposta = await service.registrar(email, senha)
        for texto in claims or []:
            tipo, valor = _parse_claim(texto)
            await service.adicionar_claim(email, tipo, valor)
        return resposta["usuario"]["id"]


async def adicionar_claim(email: str, tipo: str, valor: str | None = None) -> None:
    async with sessao_context() as session:
        service = AuthService(AuthRepository(session))
        await service.adicionar_claim(email, tipo, valor or tipo)


async def adicionar_role(email: str, role: str) -> None:
    async with sessao_context() as session:
        service = AuthService(AuthRepository(session))
        await service.adicionar_role(email, role)


async def _executar(args) -> int:
    await init_database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        if settings.CRIAR_TABELAS:
            await criar_tabelas()

        if args.command == "create-user":
            usuario_id = await criar_usuario(args.email, args.senha, args.claim)
            print(f"✅ Usuário {args.email} criado com sucesso. ID={usuario_id}")
        elif args.command == "add-claim":
            await adicionar_claim(args.email, args.tipo, args.valor)
            print(f"✅ Claim {args.tipo} concedida a {args.email}")
        elif args.command == "add-role":
            await adicionar_role(args.email, args.role)
            print(f"✅ Role {args.role} concedida a {args.email}")
        return 0
    except RegistroInvalidoError as e:
        for erro in e.erros:
            print(f"❌ {erro['codigo']}: {erro['descricao']}")
        return 1
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    finally:
        await fechar_conexao()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gerenciamento de usuários da Minimal API")

    subparsers = parser.add_subparsers(dest="command")

    # Criar Usuário
    user_parser = subparsers.add_parser("create-user", help="Criar novo usuário")
    user_parser.add_argument("--email", required=True, help="Email (também usado como login)")
    user_parser.add_argument("--senha", required=True, help="Senha do usuário")
    user_parser.add_argument(
        "--claim", action="append", default=[],
        help="Claim a conceder, TIPO ou TIPO=VALOR (pode repetir). Ex.: --claim ManterFornecedor",
    )

    # Conceder claim
    claim_parser = subparsers.add_parser("add-claim", help="Conceder claim a um usuário")
    claim_parser.add_argument("--email", required=True, help="Email do usuário")
    claim_parser.add_argument("--tipo", required=True, help="Tipo da claim (ex.: ManterFornecedor)")
    claim_parser.add_argument("--valor", required=False, help="Valor da claim (padrão: o próprio tipo)")

    # Conceder role
    role_parser = subparsers.add_parser("add-role", help="Conceder role a um usuário")
    role_parser.add_argument("--email", required=True, help="Email do usuário")
    role_parser.add_argument("--role", required=True, help="Nome da role")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(_executar(args))


if __name__ == "__main__":
    sys.exit(main())
