# fornecedores/api/routes.py

import uuid

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from authentication.domain.entities import UsuarioToken
from authentication.utils.dependencies import (
    POLITICA_MANTER_FORNECEDOR,
    exigir_manter_fornecedor,
    get_current_user,
    rota_com_politica,
)
from database.db_connection import get_session
from fornecedores.domain.entities import Fornecedor
from fornecedores.infrastructure.context_db import FornecedorRepository
from utils.logging_factory import get_logger

# Escritas (POST/PUT) checam a política antes de ler o corpo
router = APIRouter(
    prefix="/fornecedor",
    tags=["Fornecedor"],
    route_class=rota_com_politica(POLITICA_MANTER_FORNECEDOR),
)
logger = get_logger(__name__)

ERRO_SALVAR = "Houve um problema ao salvar o registro."
ERRO_REMOVER = "Houve um problema ao remover o registro."


# --------
# Models
# --------
class FornecedorRequest(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    nome: str = Field(..., min_length=1, max_length=200)
    cnpj: str = Field(..., min_length=1, max_length=14)
    cnpj_formatado: str = Field(..., min_length=1, max_length=18)
    ativo: bool = False


class FornecedorUpdateRequest(BaseModel):
    id: uuid.UUID | None = None
    nome: str = Field(..., min_length=1, max_length=200)
    cnpj: str = Field(..., min_length=1, max_length=14)
    cnpj_formatado: str = Field(..., min_length=1, max_length=18)
    ativo: bool = False


class FornecedorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    nome: str
    cnpj: str
    cnpj_formatado: str
    ativo: bool


def get_repository(session: AsyncSession = Depends(get_session)) -> FornecedorRepository:
    return FornecedorRepository(session)


# --------
# Endpoints
# --------
@router.get(
    "",
    name="listar_fornecedores",
    summary="Listar fornecedores",
    response_model=list[FornecedorResponse],
)
async def listar_fornecedores(repo: FornecedorRepository = Depends(get_repository)):
    return await repo.listar()


@router.get(
    "/{id}",
    name="obter_fornecedor_por_id",
    summary="Obter fornecedor por id",
    response_model=FornecedorResponse,
    responses={401: {"description": "Token ausente ou inválido"}, 404: {"description": "Não encontrado"}},
)
async def obter_fornecedor_por_id(
    id: uuid.UUID = Path(..., description="ID do fornecedor"),
    repo: FornecedorRepository = Depends(get_repository),
    _: UsuarioToken = Depends(get_current_user),
):
    fornecedor = await repo.obter_por_id(id)
    if fornecedor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fornecedor não encontrado")
    return fornecedor


@router.post(
    "",
    name="criar_fornecedor",
    summary="Cadastrar fornecedor",
    status_code=status.HTTP_201_CREATED,
    response_model=FornecedorResponse,
    responses={
        400: {"description": ERRO_SALVAR},
        401: {"description": "Token ausente ou inválido"},
        403: {"description": "Claim ManterFornecedor ausente"},
    },
)
async def criar_fornecedor(
    body: FornecedorRequest,
    request: Request,
    response: Response,
    repo: FornecedorRepository = Depends(get_repository),
    usuario: UsuarioToken = Depends(exigir_manter_fornecedor),
):
    fornecedor = Fornecedor(**body.model_dump())
    if await repo.adicionar(fornecedor) <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERRO_SALVAR)

    logger.info(f"✅ Fornecedor {fornecedor.id} criado por {usuario.email}")
    response.headers["Location"] = str(
        request.url_for("obter_fornecedor_por_id", id=str(fornecedor.id))
    )
    return fornecedor


@router.put(
    "/{id}",
    name="atualizar_fornecedor",
    summary="Atualizar fornecedor (substituição completa)",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": ERRO_SALVAR},
        401: {"description": "Token ausente ou inválido"},
        403: {"description": "Claim ManterFornecedor ausente"},
        404: {"description": "Não encontrado"},
    },
)
async def atualizar_fornecedor(
    body: FornecedorUpdateRequest,
    id: uuid.UUID = Path(..., description="ID do fornecedor"),
    repo: FornecedorRepository = Depends(get_repository),
    usuario: UsuarioToken = Depends(exigir_manter_fornecedor),
):
    # leitura sem rastreamento apenas para checar existência
    if await repo.obter_sem_rastreamento(id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fornecedor não encontrado")

    dados = body.model_dump()
    dados["id"] = body.id or id
    fornecedor = Fornecedor(**dados)

    if await repo.atualizar(fornecedor) <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERRO_SALVAR)

    logger.info(f"✏️ Fornecedor {fornecedor.id} atualizado por {usuario.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{id}",
    name="remover_fornecedor",
    summary="Remover fornecedor",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": ERRO_REMOVER},
        401: {"description": "Token ausente ou inválido"},
        403: {"description": "Claim ManterFornecedor ausente"},
        404: {"description": "Não encontrado"},
    },
)
async def remover_fornecedor(
    id: uuid.UUID = Path(..., description="ID do fornecedor"),
    repo: FornecedorRepository = Depends(get_repository),
    usuario: UsuarioToken = Depends(exigir_manter_fornecedor),
):
    fornecedor = await repo.obter_por_id(id)
    if fornecedor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fornecedor não encontrado")

    if await repo.remover(fornecedor) <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERRO_REMOVER)

    logger.info(f"🗑️ Fornecedor {fornecedor.id} removido por {usuario.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
