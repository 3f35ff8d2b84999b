#fornecedores/domain/entities.py

import uuid
from dataclasses import dataclass


@dataclass
class Fornecedor:
    id: uuid.UUID
    nome: str
    cnpj: str            # 14 dígitos, sem máscara
    cnpj_formatado: str  # 00.000.000/0000-00
    ativo: bool = False
