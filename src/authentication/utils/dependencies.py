# authentication/utils/dependencies.py

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.routing import APIRoute
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from authentication.domain.entities import UsuarioToken
from authentication.infrastructure.token_service import payload_para_usuario, verificar_token

# Instância global de HTTPBearer para uso em toda a aplicação.
# auto_error=False: ausência de token responde 401 (e não 403).
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Insira o token JWT desta maneira: Bearer {seu token}",
)

POLITICA_MANTER_FORNECEDOR = "ManterFornecedor"


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)
) -> UsuarioToken:
    """
    Valida o token JWT e retorna um objeto UsuarioToken com as informações do usuário.
    Levanta HTTP 401 se o token estiver ausente, inválido ou expirado.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token ausente.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = verificar_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expirado.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload_para_usuario(payload)


def exigir_claim(tipo: str, valor: str | None = None):
    """
    Política de autorização: o usuário autenticado precisa possuir a claim `tipo`
    (com qualquer valor, ou com `valor` quando informado). Sem a claim, HTTP 403.
    """

    def verificar(usuario: UsuarioToken = Depends(get_current_user)) -> UsuarioToken:
        if not usuario.possui_claim(tipo, valor):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Acesso negado: claim '{tipo}' necessária.",
            )
        return usuario

    return verificar


exigir_manter_fornecedor = exigir_claim(POLITICA_MANTER_FORNECEDOR)


def rota_com_politica(tipo: str, valor: str | None = None) -> type[APIRoute]:
    """
    Classe de rota que aplica a política `exigir_claim(tipo, valor)` antes da
    leitura do corpo. Sem ela, um JSON malformado responde 400 antes do 401/403.
    Rotas sem corpo seguem o fluxo normal das dependências.
    """
    politica = exigir_claim(tipo, valor)

    class RotaComPolitica(APIRoute):
        def get_route_handler(self):
            handler = super().get_route_handler()
            if self.body_field is None:
                return handler

            async def handler_autorizado(request: Request) -> Response:
                credentials = await bearer_scheme(request)
                politica(get_current_user(credentials))
                return await handler(request)

            return handler_autorizado

    return RotaComPolitica
