# authentication/infrastructure/token_service.py
import uuid
import jwt
from datetime import datetime, timedelta, timezone

from authentication.domain.entities import Usuario, UsuarioClaim, UsuarioToken
from minimal_api.config import settings

# Claims reservadas que não são repassadas como claims do usuário
CLAIMS_RESERVADAS = {"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud", "role"}


def expiracao_segundos() -> int:
    return int(timedelta(hours=settings.JWT_EXPIRACAO_HORAS).total_seconds())


def gerar_token(usuario: Usuario, claims: list[UsuarioClaim], roles: list[str]) -> str:
    agora = datetime.now(timezone.utc)
    payload = {
        "sub": usuario.id,
        "email": usuario.email,
        "jti": str(uuid.uuid4()),
        "nbf": agora,
        "iat": agora,
        "exp": agora + timedelta(seconds=expiracao_segundos()),
        "iss": settings.JWT_EMISSOR,
        "aud": settings.JWT_AUDIENCIA,
    }

    # 🔹 tipos repetidos viram lista
    for claim in claims:
        if claim.tipo in CLAIMS_RESERVADAS:
            continue
        atual = payload.get(claim.tipo)
        if atual is None:
            payload[claim.tipo] = claim.valor
        elif isinstance(atual, list):
            atual.append(claim.valor)
        else:
            payload[claim.tipo] = [atual, claim.valor]

    if roles:
        payload["role"] = list(roles)

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verificar_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCIA,
        issuer=settings.JWT_EMISSOR,
        options={"require": ["sub", "exp"]},
    )


def payload_para_usuario(payload: dict) -> UsuarioToken:
    claims = {}
    for tipo, valor in payload.items():
        if tipo in CLAIMS_RESERVADAS:
            continue
        valores = valor if isinstance(valor, list) else [valor]
        claims[tipo] = [str(v) for v in valores]

    roles = payload.get("role") or []
    if isinstance(roles, str):
        roles = [roles]

    return UsuarioToken(
        id=payload["sub"],
        email=payload.get("email", ""),
        claims=claims,
        roles=list(roles),
    )
