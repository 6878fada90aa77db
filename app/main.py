from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.config.settings import settings
from app.core.exceptions import BaseBusinessException, UnauthorizedException
from app.core.logger import logger
from app.core.middleware import RequestScopeMiddleware
from app.core.response_codes import ResponseCodeEnum
from app.infra.db.session import create_db_and_tables


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 应用启动中，正在初始化资源...")
    await create_db_and_tables()
    logger.info("✅ 所有资源初始化完成")

    yield

    logger.info("🛑 应用已关闭")


app = FastAPI(title="Recipe Sharing API", lifespan=lifespan)


@app.exception_handler(BaseBusinessException)
async def business_exception_handler(request: Request, exc: BaseBusinessException):
    logger.warning(f"Business Exception | code: {exc.code}, message: {exc.message}, path: {request.url.path}")
    return JSONResponse(
        status_code=200,  # 业务异常返回200，前端根据 code 判断
        content={
            "code": exc.code,
            "message": exc.message,
            "data": None
        }
    )


# 捕获 UnauthorizedException 及其子类 (TokenExpiredException, InvalidTokenException)
@app.exception_handler(UnauthorizedException)
async def auth_exception_handler(request: Request, exc: UnauthorizedException):
    return JSONResponse(
        status_code=401,
        content={
            "code": exc.code,
            "message": exc.message,
            "data": None
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled Exception | {repr(exc)} | path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "code": ResponseCodeEnum.SERVER_ERROR.code,
            "message": ResponseCodeEnum.SERVER_ERROR.message,
            "data": None
        }
    )


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestScopeMiddleware)
app.include_router(api_router, prefix=settings.server.api_prefix)
