"""
로깅 설정

모든 모듈은 ``logging.getLogger(__name__)`` 으로 로거를 얻고,
루트 로거 설정은 애플리케이션 시작 시 한 번만 적용한다.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def configure_logging(level: str = "INFO") -> None:
    """루트 로거에 stdout 핸들러를 한 번만 붙인다."""
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.addHandler(handler)
    _configured = True
