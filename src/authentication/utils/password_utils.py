# authentication/utils/password_utils.py

import bcrypt

SENHA_TAMANHO_MINIMO = 6
SENHA_TAMANHO_MAXIMO = 100


def _bytes(senha: str) -> bytes:
    # bcrypt considera apenas os primeiros 72 bytes
    return senha.encode("utf-8")[:72]


def gerar_hash_senha(senha: str) -> str:
    return bcrypt.hashpw(_bytes(senha), bcrypt.gensalt()).decode("utf-8")


def verificar_senha(senha: str, senha_hash: str) -> bool:
    return bcrypt.checkpw(_bytes(senha), senha_hash.encode("utf-8"))


def validar_senha(senha: str | None) -> list[dict]:
    """Regras de complexidade; devolve a lista de erros (vazia se a senha é aceita)."""
    senha = senha or ""
    erros = []

    if len(senha) < SENHA_TAMANHO_MINIMO:
        erros.append({
            "codigo": "PasswordTooShort",
            "descricao": f"Senhas devem ter pelo menos {SENHA_TAMANHO_MINIMO} caracteres.",
        })
    if len(senha) > SENHA_TAMANHO_MAXIMO:
        erros.append({
            "codigo": "PasswordTooLong",
            "descricao": f"Senhas devem ter no máximo {SENHA_TAMANHO_MAXIMO} caracteres.",
        })
    if not any(not ch.isalnum() for ch in senha):
        erros.append({
            "codigo": "PasswordRequiresNonAlphanumeric",
            "descricao": "Senhas devem ter pelo menos um caractere não alfanumérico.",
        })
    if not any(ch.isdigit() for ch in senha):
        erros.append({
            "codigo": "PasswordRequiresDigit",
            "descricao": "Senhas devem ter pelo menos um dígito ('0'-'9').",
        })
    if not any(ch.islower() for ch in senha):
        erros.append({
            "codigo": "PasswordRequiresLower",
            "descricao": "Senhas devem ter pelo menos uma letra minúscula ('a'-'z').",
        })
    if not any(ch.isupper() for ch in senha):
        erros.append({
            "codigo": "PasswordRequiresUpper",
            "descricao": "Senhas devem ter pelo menos uma letra maiúscula ('A'-'Z').",
        })

    return erros
