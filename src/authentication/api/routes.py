# authentication/api/routes.py

from fastapi import APIRouter, HTTPException, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from authentication.application.auth_service import AuthService
from authentication.domain.exceptions import (
    CredenciaisInvalidasError,
    RegistroInvalidoError,
    UsuarioBloqueadoError,
)
from authentication.infrastructure.auth_repository import AuthRepository
from database.db_connection import get_session

router = APIRouter(tags=["Usuario"])


# --------
# Models
# --------
class LoginRequest(BaseModel):
    email: str
    senha: str


class RegisterRequest(BaseModel):
    email: str
    senha: str
    confirmacao_senha: str | None = None


class ClaimResponse(BaseModel):
    tipo: str
    valor: str


class UsuarioResponse(BaseModel):
    id: str
    email: str
    claims: list[ClaimResponse]


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    usuario: UsuarioResponse


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(AuthRepository(session))


# --------
# Endpoints
# --------
@router.post(
    "/registro",
    name="registro_usuario",
    summary="Registrar novo usuário e obter token JWT",
    response_model=TokenResponse,
    responses={400: {"description": "Usuário não informado ou erros de validação"}},
)
async def registrar(
    request: RegisterRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    if request is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário não informado")

    try:
        return await service.registrar(request.email, request.senha, request.confirmacao_senha)
    except RegistroInvalidoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.erros)


@router.post(
    "/login",
    name="login_usuario",
    summary="Realizar login e obter token JWT",
    response_model=TokenResponse,
    responses={400: {"description": "Usuário bloqueado ou credenciais inválidas"}},
)
async def login(
    request: LoginRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    if request is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário não informado")

    try:
        return await service.login(request.email, request.senha)
    except UsuarioBloqueadoError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário bloqueado")
    except CredenciaisInvalidasError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuário ou senha inválidos")
