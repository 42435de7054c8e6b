"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error_code": "...", "message": "..."} 형식의 JSON 응답을 생성한다.

error_code는 ErrorKind 값이며, UI는 이 값으로
"잠시 후 다시 시도" / "프롬프트 수정" / "관리자 문의"를 구분한다.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    CONTENT_REJECTED = "CONTENT_REJECTED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: ErrorKind = ErrorKind.INTERNAL_ERROR
    message: str = "서버 내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 입력 검증 ---


class ValidationError(AppException):
    """호출자 입력 오류. 외부 API 호출 전에 발생한다."""

    status_code = 400
    error_code = ErrorKind.VALIDATION_ERROR
    message = "Prompt is required"


# --- 이미지 생성 API 관련 ---


class RateLimited(AppException):
    status_code = 429
    error_code = ErrorKind.RATE_LIMITED
    message = "Rate limit exceeded. Please try again later."


class ContentRejected(AppException):
    status_code = 400
    error_code = ErrorKind.CONTENT_REJECTED
    message = "Your prompt may violate content policy. Please modify your request."


class ConfigurationError(AppException):
    status_code = 401
    error_code = ErrorKind.CONFIGURATION_ERROR
    message = "API key issue. Please contact administrator."


class GenerationFailed(AppException):
    status_code = 500
    error_code = ErrorKind.GENERATION_FAILED
    message = "Failed to generate image"


# --- 로컬 저장소 관련 ---


class ImageNotFound(AppException):
    status_code = 404
    error_code = ErrorKind.IMAGE_NOT_FOUND
    message = "이미지를 찾을 수 없습니다"


class StorageCorrupted(Exception):
    """저장된 값을 읽을 수 없음. 저장소 내부에서만 쓰이고 호출자에게 전파되지 않는다."""
