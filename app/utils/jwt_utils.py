# app/utils/jwt_utils.py

from uuid import UUID

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError, PyJWTError

from app.config.settings import settings
from app.core.exceptions import TokenExpiredException, InvalidTokenException

ALGORITHM = settings.security_settings.jwt_algorithm or "HS256"
ISSUER = settings.security_settings.jwt_issuer or None
AUDIENCE = settings.security_settings.jwt_audience or None


# =====================
# Token 解码
# =====================

async def decode_token(token: str) -> dict:
    """
    校验外部身份服务签发的 access token。
    只在配置了 issuer / audience 时才校验对应字段。
    """
    options = {"verify_aud": AUDIENCE is not None, "require": ["exp", "sub"]}
    try:
        return jwt.decode(
            token,
            settings.security_settings.secret,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            audience=AUDIENCE,
            options=options,
        )
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except InvalidTokenError as e:
        raise InvalidTokenException(message=str(e))
    except PyJWTError as e:
        raise InvalidTokenException(message=str(e))


def get_user_id(payload: dict) -> UUID:
    """sub 即用户 id。"""
    sub = payload.get("sub")
    if not sub:
        raise InvalidTokenException(message="Token payload is missing user identifier (sub)")
    try:
        return UUID(str(sub))
    except ValueError:
        raise InvalidTokenException(message="Token subject is not a valid user id")
