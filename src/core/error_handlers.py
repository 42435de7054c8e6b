"""전역 예외 핸들러.

AppException 계열 예외, 요청 본문 검증 실패, 그 밖의 처리되지 않은 예외를 잡아
모두 {"error_code", "message"} JSON 응답으로 변환한다. main.py에서 app.add_exception_handler()로 등록한다.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import AppException, ErrorKind


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code.value,
            "message": exc.message,
        },
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """pydantic 검증 실패 → 422 대신 400 VALIDATION_ERROR.

    prompt 누락도 여기로 온다. 첫 번째 에러의 필드 경로를 메시지에 담는다.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = first.get("msg") or "invalid value"
        message = f"{field}: {msg}" if field else msg
    else:
        message = "Invalid request"

    return JSONResponse(
        status_code=400,
        content={
            "error_code": ErrorKind.VALIDATION_ERROR.value,
            "message": message,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외(저장소 쓰기 실패 등) → 500 INTERNAL_ERROR.

    응답에는 기본 메시지만 담고, 원인은 traceback과 함께 로그에 남긴다.
    """
    logger.opt(exception=exc).error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}"
    )
    return JSONResponse(
        status_code=AppException.status_code,
        content={
            "error_code": ErrorKind.INTERNAL_ERROR.value,
            "message": AppException.message,
        },
    )
