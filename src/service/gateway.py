"""OpenAI 이미지 생성 / 프롬프트 향상 게이트웨이.

도메인 요청(GenerationRequest)을 OpenAI SDK 호출로 바꾸고,
SDK 예외를 앱 예외(RateLimited, ContentRejected, ...)로 한 번만 분류한다.
오류 종류 판별은 SDK 예외 타입과 HTTP 상태 코드로만 한다 (메시지 문자열 매칭 없음).
"""

import asyncio

import openai
from loguru import logger
from openai import AsyncOpenAI

from core.config import settings as app_settings
from core.exceptions import (
    AppException,
    ConfigurationError,
    ContentRejected,
    GenerationFailed,
    RateLimited,
    ValidationError,
)
from model.generation import (
    DEFAULT_SIZE,
    SUPPORTED_SIZES,
    SUPPORTED_STYLES,
    GeneratedImage,
    GenerationRequest,
    GenerationResult,
)
from service import prompts
from utility.retry import retry_operation
from utility.timer import timer

CONTENT_POLICY_CODE = "content_policy_violation"
PROVIDER_SLOW_MS = 30_000


# --- 오류 분류 ---


def is_rate_limit_error(exc: BaseException) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return isinstance(exc, openai.APIStatusError) and exc.status_code == 429


def classify_provider_error(exc: BaseException) -> AppException:
    """SDK/전송 예외 → 앱 예외. 이미 AppException이면 그대로 반환."""
    if isinstance(exc, AppException):
        return exc
    if is_rate_limit_error(exc):
        return RateLimited()
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ConfigurationError()
    if isinstance(exc, openai.BadRequestError) and exc.code == CONTENT_POLICY_CODE:
        return ContentRejected()

    message = getattr(exc, "message", None) or str(exc)
    return GenerationFailed(message or None)


def is_retryable(exc: BaseException) -> bool:
    """정책 위반, 인증 오류, 입력 오류는 다시 시도해도 결과가 같다."""
    return not isinstance(
        classify_provider_error(exc), (ContentRejected, ConfigurationError, ValidationError)
    )


# --- 입력 검증 ---


def _require_prompt(prompt: str | None, field: str = "Prompt") -> str:
    if prompt is None or not str(prompt).strip():
        raise ValidationError(f"{field} is required")
    return prompt


def validate_request(request: GenerationRequest) -> None:
    _require_prompt(request.prompt)
    if request.size not in SUPPORTED_SIZES:
        raise ValidationError(
            f"Unsupported size: {request.size} (allowed: {', '.join(SUPPORTED_SIZES)})"
        )
    if request.style not in SUPPORTED_STYLES:
        raise ValidationError(
            f"Unsupported style: {request.style} (allowed: {', '.join(SUPPORTED_STYLES)})"
        )
    if isinstance(request.n, bool) or not isinstance(request.n, int) or request.n < 1:
        raise ValidationError("n must be a positive integer")


class GenerationGateway:
    """OpenAI 호출을 감싸는 게이트웨이.

    client를 넘기지 않으면 api_key로 AsyncOpenAI를 만든다.
    SDK 자체 재시도는 끄고(max_retries=0) retry_operation으로만 재시도한다.
    api_key도 client도 없으면 모든 호출이 ConfigurationError가 된다.
    """

    def __init__(
        self,
        client=None,
        *,
        api_key: str | None = None,
        image_model: str = "dall-e-3",
        text_model: str = "gpt-4o",
        max_retries: int = 3,
        delay_ms: int = 2000,
        enhance_temperature: float = 0.7,
        enhance_max_tokens: int = 300,
        timeout: float = 120.0,
        sleep=asyncio.sleep,
    ):
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.image_model = image_model
        self.text_model = text_model
        self.max_retries = max_retries
        self.delay_ms = delay_ms
        self.enhance_temperature = enhance_temperature
        self.enhance_max_tokens = enhance_max_tokens
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings=app_settings, **overrides) -> "GenerationGateway":
        options = dict(
            api_key=settings.OPENAI_API_KEY,
            image_model=settings.IMAGE_MODEL,
            text_model=settings.TEXT_MODEL,
            max_retries=settings.RETRY_MAX_ATTEMPTS,
            delay_ms=settings.RETRY_DELAY_MS,
            enhance_temperature=settings.ENHANCE_TEMPERATURE,
            enhance_max_tokens=settings.ENHANCE_MAX_TOKENS,
            timeout=settings.OPENAI_TIMEOUT,
        )
        options.update(overrides)
        return cls(**options)

    @property
    def configured(self) -> bool:
        return self.client is not None

    # --- public API ---

    async def generate_image(self, request: GenerationRequest) -> GenerationResult:
        validate_request(request)
        return await self._images_generate(
            prompt=request.prompt,
            size=request.size,
            style=request.style,
            n=request.n,
            label="generate",
        )

    async def create_variation(self, request: GenerationRequest) -> GenerationResult:
        """참조 이미지 URL을 설명에 넣어 새로 생성한다 (픽셀 단위 편집 아님).

        reference_image_url이 없으면 prompt 그대로 생성한다.
        size/style은 쓰지 않고 항상 1024x1024로 요청한다.
        """
        validate_request(request)
        return await self._images_generate(
            prompt=prompts.variation_prompt(request.prompt, request.reference_image_url),
            size=DEFAULT_SIZE,
            n=request.n,
            label="variation",
        )

    async def edit_image(self, image_url: str, prompt: str) -> GenerationResult:
        """편집도 변형과 마찬가지로 설명 기반 재생성이다."""
        if not image_url or not str(image_url).strip() or not prompt or not str(prompt).strip():
            raise ValidationError("Image URL and prompt are required")
        return await self._images_generate(
            prompt=prompts.edit_prompt(image_url, prompt),
            size=DEFAULT_SIZE,
            n=1,
            label="edit",
        )

    async def enhance_prompt(self, prompt: str, language: str | None = None) -> str:
        _require_prompt(prompt)
        language = language or prompts.DEFAULT_LANGUAGE
        if language not in prompts.SUPPORTED_LANGUAGES:
            raise ValidationError(
                f"Unsupported language: {language} "
                f"(allowed: {', '.join(prompts.SUPPORTED_LANGUAGES)})"
            )
        client = self._require_client()

        async def call():
            with timer(f"chat.completions.create ({language})", slow_ms=PROVIDER_SLOW_MS):
                return await client.chat.completions.create(
                    model=self.text_model,
                    messages=[
                        {"role": "system", "content": prompts.enhance_instruction(language)},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.enhance_temperature,
                    max_tokens=self.enhance_max_tokens,
                )

        response = await self._invoke(call, "enhance")

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            logger.error("Prompt enhancement returned no content")
            raise GenerationFailed("Failed to enhance prompt")
        return content.strip()

    # --- internals ---

    def _require_client(self):
        if self.client is None:
            logger.error("OPENAI_API_KEY is not configured")
            raise ConfigurationError()
        return self.client

    async def _images_generate(
        self,
        *,
        prompt: str,
        size: str,
        n: int,
        label: str,
        style: str | None = None,
    ) -> GenerationResult:
        client = self._require_client()
        params = {"model": self.image_model, "prompt": prompt, "n": n, "size": size}
        if style:
            params["style"] = style

        async def call():
            with timer(f"images.generate ({label})", slow_ms=PROVIDER_SLOW_MS):
                return await client.images.generate(**params)

        response = await self._invoke(call, label)

        images = [
            GeneratedImage(url=item.url, revised_prompt=getattr(item, "revised_prompt", None))
            for item in (getattr(response, "data", None) or [])
            if getattr(item, "url", None)
        ]
        if not images:
            logger.error(f"[{label}] provider returned no image data")
            raise GenerationFailed("No image data returned")

        logger.info(f"[{label}] generated {len(images)} image(s) ({size})")
        return GenerationResult(
            created=getattr(response, "created", 0) or 0,
            images=images,
        )

    async def _invoke(self, call, label: str):
        """재시도 후에도 실패하면 여기서 한 번만 분류해서 던진다."""
        try:
            return await retry_operation(
                call,
                self.max_retries,
                self.delay_ms,
                is_rate_limited=is_rate_limit_error,
                should_retry=is_retryable,
                sleep=self.sleep,
            )
        except AppException:
            raise
        except Exception as e:
            error = classify_provider_error(e)
            logger.error(f"[{label}] {error.error_code.value}: {e}")
            raise error from e
