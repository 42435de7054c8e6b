"""이미지 생성 세션 조정.

"향상 → 생성 → 저장"을 하나의 사용자 작업으로 묶는다.
순서: 향상(요청 시) → 생성 → 저장. 생성이 실패하면 저장소는 건드리지 않는다.
취소는 없다. 시작된 제출은 성공하거나 재시도가 끝날 때까지 진행된다.
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from core.exceptions import AppException, ValidationError
from model.generation import DEFAULT_SIZE, DEFAULT_STYLE, GenerationRequest
from model.image import ImageRecord, NewImage
from service.gateway import GenerationGateway
from service.image_store import LocalImageStore

MIN_PROMPT_LENGTH = 3


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class EnhanceState(str, Enum):
    IDLE = "idle"
    ENHANCING = "enhancing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Submission:
    """제출 1건의 진행 상태.

    reference_image_url은 변형(run_variation) 제출에서만 쓴다.
    error에는 분류된 AppException, 저장 실패면 저장소 예외가 그대로 남는다.
    """

    prompt: str
    size: str = DEFAULT_SIZE
    style: str = DEFAULT_STYLE
    enhance: bool = False
    language: str = "en"
    enhanced_prompt: str | None = None
    reference_image_url: str | None = None
    state: SubmissionState = SubmissionState.IDLE
    enhance_state: EnhanceState = EnhanceState.IDLE
    record: ImageRecord | None = None
    error: Exception | None = None


def validate_prompt(prompt: str | None) -> str:
    if not prompt or len(prompt.strip()) < MIN_PROMPT_LENGTH:
        raise ValidationError(
            f"Please enter a prompt with at least {MIN_PROMPT_LENGTH} characters"
        )
    return prompt


class SessionCoordinator:
    def __init__(self, gateway: GenerationGateway, store: LocalImageStore):
        self.gateway = gateway
        self.store = store

    async def enhance(self, prompt: str, language: str = "en") -> str:
        validate_prompt(prompt)
        return await self.gateway.enhance_prompt(prompt, language)

    async def run(self, submission: Submission) -> ImageRecord:
        """제출을 실행하고 저장된 레코드를 반환한다.

        1. 프롬프트 검증 (3자 미만 → ValidationError, 게이트웨이 호출 없음)
        2. enhance=True이고 향상된 프롬프트가 없으면 먼저 향상
        3. 향상된 프롬프트(있으면) 또는 원래 프롬프트로 생성
        4. 첫 번째 이미지를 저장 (prompt는 원래 입력, enhancedPrompt는 향상했을 때만)
        생성이나 저장이 실패하면 state=FAILED, error에 예외를 남기고 다시 던진다.
        """
        self._validate(submission)

        if submission.enhance and not submission.enhanced_prompt:
            await self._enhance(submission)

        request = GenerationRequest(
            prompt=submission.enhanced_prompt or submission.prompt,
            size=submission.size,
            style=submission.style,
        )
        return await self._generate_and_save(submission, self.gateway.generate_image, request)

    async def run_variation(self, submission: Submission) -> ImageRecord:
        """변형 이미지를 생성하고 저장한다. 레코드의 prompt는 변경 설명이다.

        향상 단계는 없고 상태 전이는 run과 같다.
        """
        self._validate(submission)

        request = GenerationRequest(
            prompt=submission.prompt,
            reference_image_url=submission.reference_image_url,
        )
        return await self._generate_and_save(submission, self.gateway.create_variation, request)

    def delete(self, image_id: str) -> bool:
        return self.store.delete_by_id(image_id)

    def clear(self) -> None:
        self.store.clear_all()

    def _validate(self, submission: Submission) -> None:
        try:
            validate_prompt(submission.prompt)
        except ValidationError as e:
            self._fail(submission, e)
            raise

    async def _enhance(self, submission: Submission) -> None:
        submission.enhance_state = EnhanceState.ENHANCING
        try:
            submission.enhanced_prompt = await self.gateway.enhance_prompt(
                submission.prompt, submission.language
            )
        except AppException as e:
            submission.enhance_state = EnhanceState.FAILED
            self._fail(submission, e)
            raise
        submission.enhance_state = EnhanceState.SUCCEEDED

    async def _generate_and_save(self, submission: Submission, generate, request) -> ImageRecord:
        submission.state = SubmissionState.SUBMITTING
        try:
            result = await generate(request)
            submission.record = self.store.save(
                NewImage(
                    url=result.images[0].url,
                    prompt=submission.prompt,
                    enhanced_prompt=submission.enhanced_prompt,
                )
            )
        except Exception as e:
            self._fail(submission, e)
            raise

        submission.state = SubmissionState.SUCCEEDED
        return submission.record

    def _fail(self, submission: Submission, error: Exception) -> None:
        submission.state = SubmissionState.FAILED
        submission.error = error
        kind = error.error_code.value if isinstance(error, AppException) else type(error).__name__
        logger.warning(f"Submission failed: {kind} ({error})")
