"""
密码哈希：bcrypt 加盐单向哈希，cost 固定为 10
"""

import bcrypt

from app.common.errors import ValidationFailed

BCRYPT_ROUNDS = 10
# bcrypt 只处理前 72 字节，超出部分会被截断或直接报错
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """生成密码哈希"""
    raw = password.encode()
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValidationFailed("密码过长")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """校验密码（bcrypt 内部为常量时间比较）；超长或哈希格式异常一律视为不匹配"""
    raw = plain_password.encode()
    if len(raw) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, hashed_password.encode())
    except ValueError:
        return False
