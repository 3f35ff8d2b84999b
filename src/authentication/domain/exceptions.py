#authentication/domain/exceptions.py


class CredenciaisInvalidasError(ValueError):
    pass


class UsuarioBloqueadoError(ValueError):
    pass


class RegistroInvalidoError(ValueError):
    """Falha ao criar usuário; `erros` segue o formato [{"codigo", "descricao"}]."""

    def __init__(self, erros: list[dict]):
        super().__init__("; ".join(e["descricao"] for e in erros))
        self.erros = erros
