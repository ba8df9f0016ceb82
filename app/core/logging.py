# app/core/logging.py

"""
애플리케이션 전역 로깅 설정 모듈입니다.
각 모듈은 logging.getLogger(__name__)으로 로거를 얻고, 핸들러/포맷은 여기서 한 번만 구성합니다.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """루트 로거에 스트림 핸들러를 한 번만 연결합니다."""
    global _configured
    if _configured:
        logging.getLogger().setLevel(level.upper())
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # SQL 로그는 DEBUG_MODE의 echo 옵션으로만 제어합니다.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
