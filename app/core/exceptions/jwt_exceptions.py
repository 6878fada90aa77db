from app.core.exceptions.base_exception import BaseBusinessException
from app.core.response_codes import ResponseCodeEnum


class UnauthorizedException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.AUTH_ERROR, status_code=401, message=message)

class TokenExpiredException(UnauthorizedException):
    def __init__(self, message: str = None):
        super().__init__(message or ResponseCodeEnum.TOKEN_EXPIRED.message)
        self.code = ResponseCodeEnum.TOKEN_EXPIRED.code

class InvalidTokenException(UnauthorizedException):
    def __init__(self, message: str = None):
        super().__init__(message or ResponseCodeEnum.TOKEN_INVALID.message)
        self.code = ResponseCodeEnum.TOKEN_INVALID.code
