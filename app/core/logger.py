# app/core/logger.py
from loguru import logger
import sys
from pathlib import Path
from app.config.settings import settings

# 运行环境 (dev 时输出 DEBUG 日志)
ENV = settings.server.env.lower()

# 清除默认 handler
logger.remove()

# 控制台输出
logger.add(
    sys.stderr,
    level="DEBUG" if ENV == "dev" else "INFO",
    colorize=True,
    enqueue=True,
    backtrace=True,
    diagnose=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level: <8}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>"
)

if settings.logging.enable_file:
    log_dir = Path(settings.logging.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # 普通文本日志输出到文件
    logger.add(
        log_dir / "app.log",
        level="DEBUG",
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=True
    )

    # JSON 结构化日志输出，只记录警告及以上
    logger.add(
        log_dir / "app.json",
        level="WARNING",
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
        serialize=True,
        encoding="utf-8",
        enqueue=True
    )


def get_logger(name: str = None):
    """仿 logging.getLogger() 实现的 loguru logger 工厂方法"""
    if name:
        return logger.bind(module=name)
    return logger


logger.debug(f"Log system initialized in {ENV} mode.")
