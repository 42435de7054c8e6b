import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from core.config import settings
from core.error_handlers import (
    app_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from core.exceptions import AppException
from core.lifespan import lifespan
from core.middleware import RequestLoggingMiddleware
from router.generation_router import router as generation_router
from router.image_router import router as image_router
from utility.logger import setup_logger
import model.storage  # noqa: F401 (테이블 등록)

setup_logger()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="DALL-E 이미지 생성 / 프롬프트 향상 / 로컬 갤러리 API",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(generation_router)
app.include_router(image_router)


@app.get("/health")
async def health(request: Request):
    gateway = getattr(request.app.state, "gateway", None)
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "provider_configured": bool(gateway and gateway.configured),
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        access_log=False,
    )
