"""외부 API 호출 시간 측정 유틸리티."""

import time
from contextlib import contextmanager

from loguru import logger


@contextmanager
def timer(label: str = "", slow_ms: float | None = None):
    """컨텍스트 매니저: 블록 실행 시간을 ms 단위로 측정한다.

    slow_ms를 넘기면 WARNING, 아니면 DEBUG로 기록한다.
    async 함수 안에서도 await를 감싸 쓸 수 있다.

    사용법:
        with timer("images.generate", slow_ms=30_000) as t:
            response = await client.images.generate(...)
        t.elapsed_ms
    """
    t = _TimerResult()
    start = time.perf_counter()
    try:
        yield t
    finally:
        t.elapsed_ms = (time.perf_counter() - start) * 1000
        if label:
            if slow_ms is not None and t.elapsed_ms > slow_ms:
                logger.warning(f"[{label}] {t.elapsed_ms:.0f}ms (slow)")
            else:
                logger.debug(f"[{label}] {t.elapsed_ms:.0f}ms")


class _TimerResult:
    elapsed_ms: float = 0.0
