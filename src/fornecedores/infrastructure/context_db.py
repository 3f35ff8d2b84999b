# fornecedores/infrastructure/context_db.py

import uuid
from typing import Optional

from sqlalchemy import Boolean, Column, String, Table, Uuid, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.db_connection import mapper_registry, metadata
from fornecedores.domain.entities import Fornecedor
from utils.logging_factory import get_logger

logger = get_logger(__name__)

fornecedores_table = Table(
    "fornecedores",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("nome", String(200), nullable=False),
    Column("cnpj", String(14), nullable=False),
    Column("cnpj_formatado", String(18), nullable=False),
    Column("ativo", Boolean, nullable=False, default=False),
)

mapper_registry.map_imperatively(Fornecedor, fornecedores_table)


class FornecedorRepository:
    """
    Operações de leitura/escrita sobre a tabela `fornecedores`.

    Cada escrita faz commit e devolve a quantidade de linhas afetadas;
    falhas de banco são registradas no log, revertidas e devolvem 0.
    """

    def __init__(self, session: AsyncSession):
        if session is None:
            raise ValueError("❌ Sessão com o banco de dados é None.")
        self.session = session

    async def listar(self) -> list[Fornecedor]:
        result = await self.session.execute(select(Fornecedor))
        return list(result.scalars().all())

    async def obter_por_id(self, fornecedor_id: uuid.UUID) -> Optional[Fornecedor]:
        return await self.session.get(Fornecedor, fornecedor_id)

    async def obter_sem_rastreamento(self, fornecedor_id: uuid.UUID) -> Optional[Fornecedor]:
        result = await self.session.execute(
            select(Fornecedor).where(fornecedores_table.c.id == fornecedor_id)
        )
        fornecedor = result.scalar_one_or_none()
        if fornecedor is not None:
            self.session.expunge(fornecedor)
        return fornecedor

    async def adicionar(self, fornecedor: Fornecedor) -> int:
        self.session.add(fornecedor)
        try:
            await self.session.commit()
            return 1
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Erro ao inserir fornecedor {fornecedor.id}: {e}")
            return 0

    async def atualizar(self, fornecedor: Fornecedor) -> int:
        stmt = (
            update(fornecedores_table)
            .where(fornecedores_table.c.id == fornecedor.id)
            .values(
                nome=fornecedor.nome,
                cnpj=fornecedor.cnpj,
                cnpj_formatado=fornecedor.cnpj_formatado,
                ativo=fornecedor.ativo,
            )
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Erro ao atualizar fornecedor {fornecedor.id}: {e}")
            return 0

    async def remover(self, fornecedor: Fornecedor) -> int:
        stmt = delete(fornecedores_table).where(fornecedores_table.c.id == fornecedor.id)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
            return result.rowcount
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Erro ao remover fornecedor {fornecedor.id}: {e}")
            return 0
