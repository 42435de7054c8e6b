"""외부 호출 재시도 유틸리티.

대기 시간은 지수 증가가 아니라 고정값이다.
rate limit 오류면 delay_ms * 3, 그 외 오류면 delay_ms를 매 시도마다 똑같이 적용한다.
(지수 백오프 + jitter로 바꿀 여지가 있지만 기존 클라이언트 동작과 맞추기 위해 유지)
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")

RATE_LIMIT_DELAY_FACTOR = 3


def _always(exc: BaseException) -> bool:
    return True


def _never(exc: BaseException) -> bool:
    return False


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay_ms: int = 1000,
    *,
    is_rate_limited: Callable[[BaseException], bool] = _never,
    should_retry: Callable[[BaseException], bool] = _always,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """operation을 최대 max_retries번 실행한다.

    - 성공하면 결과를 그대로 반환
    - 실패할 때마다 대기 후 재시도 (마지막 실패 뒤에도 한 번 대기)
    - should_retry가 False인 오류는 대기 없이 즉시 다시 던진다
    - 모두 실패하면 마지막 오류를 감싸지 않고 그대로 던진다

    operation은 매 시도마다 다시 호출되므로 호출자 입장에서 멱등이어야 한다.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")
    if delay_ms < 0:
        raise ValueError("delay_ms must be >= 0")

    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            return await operation()
        except Exception as e:
            last_error = e

            if not should_retry(e):
                logger.info(f"Attempt {attempt + 1} failed with non-retryable {type(e).__name__}")
                raise

            wait_ms = delay_ms * RATE_LIMIT_DELAY_FACTOR if is_rate_limited(e) else delay_ms
            logger.warning(
                f"Attempt {attempt + 1}/{max_retries} failed ({type(e).__name__}), "
                f"retrying in {wait_ms}ms..."
            )
            await sleep(wait_ms / 1000)

    raise last_error
