import logging

from loguru import logger

from lottery_areas.core.config import settings


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger_opt = logger.bind(request_id="app").opt(exception=record.exc_info)
        logger_opt.log(level, record.getMessage())


def setup_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).handlers = [InterceptHandler()]
    logger.add(
        settings.log_file,
        rotation="1 MB",
        retention="7 days",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=settings.log_level,
    )
