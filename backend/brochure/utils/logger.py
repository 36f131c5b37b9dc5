"""
레이아웃 엔진 로깅 유틸리티

서비스 모듈은 get_logger(__name__) 로 LayoutLogger 를 받아 `context=` 딕셔너리와 함께 기록한다.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from brochure.core.config import settings

NOISY_LOGGERS = ("asyncio", "sqlalchemy", "aiosqlite", "PIL", "multipart")


class StructuredFormatter(logging.Formatter):
    """한 줄 JSON 포맷터 (context 포함)"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LayoutLogger:
    """레이아웃 엔진용 로거 래퍼

    debug 는 개발 환경에서만, pointer_move 단위 추적은 DEBUG_GESTURES 가 켜졌을 때만 남긴다.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    @staticmethod
    def _extra(context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {"context": context} if context else {}

    def error(self, message: str, exc_info: Optional[BaseException] = None, context: Optional[Dict[str, Any]] = None):
        self.logger.error(message, exc_info=exc_info, extra=self._extra(context))

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.logger.warning(message, extra=self._extra(context))

    def info(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._extra(context))

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None):
        if settings.ENVIRONMENT == "development":
            self.logger.debug(message, extra=self._extra(context))

    def debug_gesture(self, message: str, context: Optional[Dict[str, Any]] = None):
        if settings.DEBUG_GESTURES:
            self.logger.debug(f"[gesture] {message}", extra=self._extra(context))


def setup_logging() -> logging.Logger:
    """루트 로거 구성: 개발 환경은 DEBUG, 그 외는 LOG_LEVEL"""
    if settings.ENVIRONMENT == "development":
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if settings.ENVIRONMENT == "production" or settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers[:] = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root


def get_logger(name: str) -> LayoutLogger:
    return LayoutLogger(name)


setup_logging()
