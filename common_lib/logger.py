import logging
import sys

_logging_configured = False


def setup_logging(level: str | None = None):
    global _logging_configured
    if _logging_configured:
        return

    if level is None:
        from .config import get_settings

        level = get_settings().log_level

    # MCP stdio 전송은 stdout을 사용하므로 로그는 stderr로 보냄
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
        stream=sys.stderr,
        force=True  # 기존 설정 강제 덮어쓰기
    )

    # 라이브러리 로그 레벨 조정
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str):
    """명명된 로거 가져오기(Get a named logger).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    setup_logging()
    return logging.getLogger(name)
