"""
구조화 로깅 설정

structlog를 표준 logging 위에 구성합니다.
"""

import logging
import sys

import structlog

from catalog.core.config import Settings


def configure_logging(settings: Settings) -> None:
    """
    structlog 및 표준 logging 초기화

    Args:
        settings: 애플리케이션 설정 (log_level 사용)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
