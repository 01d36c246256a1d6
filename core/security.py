"""
Hash e verificação de senhas.

Localização: core/security.py

Senhas são guardadas como hash bcrypt. O AuthService só conhece a
função de comparação (``check_password``), não o algoritmo.
"""
from typing import Optional

import bcrypt

# bcrypt só considera os primeiros 72 bytes da senha; versões recentes recusam o excedente
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Gera o hash bcrypt de uma senha.

    Args:
        password: Senha em texto plano
        rounds: Custo do bcrypt (default da biblioteca se None)

    Returns:
        Hash em string utf-8
    """
    salt = bcrypt.gensalt(rounds) if rounds else bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def password_too_long(password: str) -> bool:
    return len(password.encode('utf-8')) > BCRYPT_MAX_BYTES


def check_password(password: Optional[str], hashed: Optional[str]) -> bool:
    """
    Compara a senha informada com o hash armazenado.

    Hash ausente, senha que não é texto ou hash em formato inválido
    contam como senha errada.
    """
    if not isinstance(password, str) or not isinstance(hashed, str):
        return False
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # hash salvo inválido ou senha acima de BCRYPT_MAX_BYTES
        return False
