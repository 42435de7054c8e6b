import time

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 HTTP 요청을 로깅하는 미들웨어.

    기록 항목: 메서드, 경로, 클라이언트 IP, 상태코드, 처리시간(ms)
    처리시간이 SLOW_REQUEST_MS를 넘으면 WARNING, 5xx 응답은 ERROR로 기록.
    이미지 생성은 재시도 대기 때문에 수 초가 걸릴 수 있다.
    """

    def __init__(self, app, slow_threshold_ms: int | None = None):
        super().__init__(app)
        self.slow_threshold_ms = (
            settings.SLOW_REQUEST_MS if slow_threshold_ms is None else slow_threshold_ms
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start) * 1000
        client_ip = request.client.host if request.client else "unknown"
        line = (
            f"{request.method} {request.url.path} | {client_ip} | "
            f"{response.status_code} | {elapsed_ms:.0f}ms"
        )

        if response.status_code >= 500:
            logger.error(line)
        elif elapsed_ms > self.slow_threshold_ms:
            logger.warning(f"{line} (slow)")
        else:
            logger.info(line)

        return response
