# tests/test_password_utils.py

from authentication.utils.password_utils import gerar_hash_senha, validar_senha, verificar_senha


def test_hash_e_verificacao():
    senha_hash = gerar_hash_senha("Senha@123")
    assert senha_hash != "Senha@123"
    assert verificar_senha("Senha@123", senha_hash)
    assert not verificar_senha("senha@123", senha_hash)


def test_senha_valida_nao_tem_erros():
    assert validar_senha("Senha@123") == []


def test_senha_sem_requisitos():
    codigos = [e["codigo"] for e in validar_senha("aaaaaa")]
    assert codigos == [
        "PasswordRequiresNonAlphanumeric",
        "PasswordRequiresDigit",
        "PasswordRequiresUpper",
    ]


def test_senha_vazia_ou_nula():
    codigos = {e["codigo"] for e in validar_senha(None)}
    assert "PasswordTooShort" in codigos
    assert "PasswordRequiresLower" in codigos


def test_senha_longa_demais():
    codigos = [e["codigo"] for e in validar_senha("Aa1@" * 30)]
    assert codigos == ["PasswordTooLong"]
