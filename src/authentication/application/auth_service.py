# authentication/application/auth_service.py

import re
import uuid
from datetime import datetime, timedelta, timezone

from authentication.domain.entities import Usuario, UsuarioClaim
from authentication.domain.exceptions import (
    CredenciaisInvalidasError,
    RegistroInvalidoError,
    UsuarioBloqueadoError,
)
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.token_service import expiracao_segundos, gerar_token
from authentication.utils.password_utils import gerar_hash_senha, validar_senha, verificar_senha
from minimal_api.config import settings
from utils.logging_factory import get_logger

logger = get_logger(__name__)

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _agora() -> datetime:
    # timestamps gravados em UTC sem tzinfo (SQLite não preserva o fuso)
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AuthService:
    def __init__(self, repo: AuthRepository):
        self.repo = repo

    async def registrar(self, email: str, senha: str, confirmacao_senha: str | None = None) -> dict:
        email = (email or "").strip()
        erros = []

        if not EMAIL_REGEX.match(email):
            erros.append({"codigo": "InvalidEmail", "descricao": f"O email '{email}' é inválido."})
        elif await self.repo.buscar_usuario_por_email(email):
            erros.append({
                "codigo": "DuplicateUserName",
                "descricao": f"O login '{email}' já está sendo utilizado.",
            })

        erros.extend(validar_senha(senha))

        if confirmacao_senha is not None and confirmacao_senha != senha:
            erros.append({"codigo": "PasswordMismatch", "descricao": "As senhas não conferem."})

        if erros:
            logger.warning(f"⚠️ Registro recusado para {email}: {[e['codigo'] for e in erros]}")
            raise RegistroInvalidoError(erros)

        usuario = Usuario(
            id=str(uuid.uuid4()),
            email=email,
            nome_usuario=email,
            senha_hash=gerar_hash_senha(senha),
            email_confirmado=True,
            lockout_habilitado=True,
            tentativas_falhas=0,
            criado_em=_agora(),
        )
        await self.repo.criar_usuario(usuario)
        logger.info(f"✅ Usuário {email} registrado (id={usuario.id}).")

        return await self.montar_resposta(usuario)

    async def login(self, email: str, senha: str) -> dict:
        usuario = await self.repo.buscar_usuario_por_email(email or "")
        if not usuario:
            raise CredenciaisInvalidasError("Usuário ou senha inválidos")

        if self._bloqueado(usuario):
            logger.warning(f"🔒 Tentativa de login com usuário bloqueado: {usuario.email}")
            raise UsuarioBloqueadoError("Usuário bloqueado")

        if verificar_senha(senha or "", usuario.senha_hash):
            if usuario.tentativas_falhas or usuario.lockout_fim:
                usuario.tentativas_falhas = 0
                usuario.lockout_fim = None
                await self.repo.salvar_usuario(usuario)
            logger.info(f"✅ Login efetuado: {usuario.email}")
            return await self.montar_resposta(usuario)

        await self._registrar_falha(usuario)
        if self._bloqueado(usuario):
            raise UsuarioBloqueadoError("Usuário bloqueado")
        raise CredenciaisInvalidasError("Usuário ou senha inválidos")

    async def montar_resposta(self, usuario: Usuario) -> dict:
        claims = await self.repo.listar_claims(usuario.id)
        roles = await self.repo.listar_roles(usuario.id)
        token = gerar_token(usuario, claims, roles)

        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": expiracao_segundos(),
            "usuario": {
                "id": usuario.id,
                "email": usuario.email,
                "claims": [{"tipo": c.tipo, "valor": c.valor} for c in claims]
                + [{"tipo": "role", "valor": r} for r in roles],
            },
        }

    async def adicionar_claim(self, email: str, tipo: str, valor: str) -> UsuarioClaim:
        usuario = await self.repo.buscar_usuario_por_email(email)
        if not usuario:
            raise ValueError(f"Usuário {email} não encontrado")

        claim = UsuarioClaim(usuario_id=usuario.id, tipo=tipo, valor=valor)
        await self.repo.adicionar_claim(claim)
        logger.info(f"🔑 Claim {tipo}={valor} concedida a {email}")
        return claim

    async def adicionar_role(self, email: str, role: str) -> None:
        usuario = await self.repo.buscar_usuario_por_email(email)
        if not usuario:
            raise ValueError(f"Usuário {email} não encontrado")

        await self.repo.adicionar_role(usuario.id, role)
        logger.info(f"🔑 Role {role} concedida a {email}")

    # --------
    # Lockout
    # --------
    @staticmethod
    def _bloqueado(usuario: Usuario) -> bool:
        return (
            usuario.lockout_habilitado
            and usuario.lockout_fim is not None
            and usuario.lockout_fim > _agora()
        )

    async def _registrar_falha(self, usuario: Usuario) -> None:
        if not usuario.lockout_habilitado:
            logger.info(f"❌ Senha inválida para {usuario.email}")
            return

        usuario.tentativas_falhas = (usuario.tentativas_falhas or 0) + 1
        if usuario.tentativas_falhas >= settings.LOCKOUT_MAX_TENTATIVAS:
            usuario.lockout_fim = _agora() + timedelta(minutes=settings.LOCKOUT_MINUTOS)
            usuario.tentativas_falhas = 0
            logger.warning(
                f"🔒 Usuário {usuario.email} bloqueado até {usuario.lockout_fim.isoformat()} (UTC)"
            )
        else:
            logger.info(
                f"❌ Senha inválida para {usuario.email} "
                f"({usuario.tentativas_falhas}/{settings.LOCKOUT_MAX_TENTATIVAS})"
            )

        await self.repo.salvar_usuario(usuario)
