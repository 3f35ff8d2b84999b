# authentication/infrastructure/auth_repository.py

from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authentication.domain.entities import Usuario, UsuarioClaim, UsuarioRole
from authentication.domain.exceptions import RegistroInvalidoError
from database.db_connection import mapper_registry, metadata
from utils.logging_factory import get_logger

logger = get_logger(__name__)

usuarios_table = Table(
    "usuarios",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(256), nullable=False),
    Column("nome_usuario", String(256), nullable=False, unique=True),
    Column("senha_hash", String(255), nullable=False),
    Column("email_confirmado", Boolean, nullable=False, default=False),
    Column("lockout_habilitado", Boolean, nullable=False, default=True),
    Column("lockout_fim", DateTime, nullable=True),
    Column("tentativas_falhas", Integer, nullable=False, default=0),
    Column("criado_em", DateTime, nullable=True),
)

usuario_claims_table = Table(
    "usuario_claims",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("usuario_id", String(36), ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("tipo", String(256), nullable=False),
    Column("valor", String(256), nullable=False),
)

usuario_roles_table = Table(
    "usuario_roles",
    metadata,
    Column("usuario_id", String(36), ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True),
    Column("role", String(256), primary_key=True),
)

mapper_registry.map_imperatively(Usuario, usuarios_table)
mapper_registry.map_imperatively(UsuarioClaim, usuario_claims_table)
mapper_registry.map_imperatively(UsuarioRole, usuario_roles_table)


class AuthRepository:
    def __init__(self, session: AsyncSession):
        if session is None:
            raise ValueError("❌ Sessão com o banco de dados é None.")
        self.session = session

    async def buscar_usuario_por_email(self, email: str) -> Optional[Usuario]:
        result = await self.session.execute(
            select(Usuario)
            .where(func.lower(usuarios_table.c.nome_usuario) == email.strip().lower())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def criar_usuario(self, usuario: Usuario) -> None:
        self.session.add(usuario)
        try:
            await self.session.commit()
        except IntegrityError:
            # UNIQUE em nome_usuario: registro concorrente com o mesmo login
            await self.session.rollback()
            logger.warning(f"⚠️ Login duplicado rejeitado pelo banco: {usuario.nome_usuario}")
            raise RegistroInvalidoError([
                {
                    "codigo": "DuplicateUserName",
                    "descricao": f"O login '{usuario.nome_usuario}' já está sendo utilizado.",
                }
            ])

    async def salvar_usuario(self, usuario: Usuario) -> None:
        """Persiste alterações de lockout/contador em um usuário já carregado."""
        self.session.add(usuario)
        await self.session.commit()

    async def listar_claims(self, usuario_id: str) -> list[UsuarioClaim]:
        result = await self.session.execute(
            select(UsuarioClaim)
            .where(usuario_claims_table.c.usuario_id == usuario_id)
            .order_by(usuario_claims_table.c.id)
        )
        return list(result.scalars().all())

    async def adicionar_claim(self, claim: UsuarioClaim) -> None:
        existentes = await self.listar_claims(claim.usuario_id)
        if any(c.tipo == claim.tipo and c.valor == claim.valor for c in existentes):
            return
        self.session.add(claim)
        await self.session.commit()

    async def listar_roles(self, usuario_id: str) -> list[str]:
        result = await self.session.execute(
            select(usuario_roles_table.c.role)
            .where(usuario_roles_table.c.usuario_id == usuario_id)
            .order_by(usuario_roles_table.c.role)
        )
        return list(result.scalars().all())

    async def adicionar_role(self, usuario_id: str, role: str) -> None:
        if role in await self.listar_roles(usuario_id):
            return
        self.session.add(UsuarioRole(usuario_id=usuario_id, role=role))
        await self.session.commit()
