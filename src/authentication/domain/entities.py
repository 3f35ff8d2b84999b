#authentication/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Usuario:
    id: str
    email: str
    nome_usuario: str
    senha_hash: str
    email_confirmado: bool = True
    lockout_habilitado: bool = True
    lockout_fim: Optional[datetime] = None  # UTC, sem tzinfo
    tentativas_falhas: int = 0
    criado_em: Optional[datetime] = None


@dataclass
class UsuarioClaim:
    usuario_id: str
    tipo: str
    valor: str
    id: Optional[int] = None


@dataclass
class UsuarioRole:
    usuario_id: str
    role: str


@dataclass
class UsuarioToken:
    """Principal extraído de um token JWT válido."""
    id: str
    email: str
    claims: dict[str, list[str]] = field(default_factory=dict)
    roles: list[str] = field(default_factory=list)

    def possui_claim(self, tipo: str, valor: Optional[str] = None) -> bool:
        valores = self.claims.get(tipo)
        if not valores:
            return False
        return valor is None or valor in valores
