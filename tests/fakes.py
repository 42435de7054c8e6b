"""테스트용 가짜 OpenAI 클라이언트와 SDK 예외 생성 헬퍼.

AsyncOpenAI에서 실제로 쓰는 부분(images.generate, chat.completions.create)만 흉내 낸다.
failures에 예외를 넣으면 앞에서부터 하나씩 던지고, 비면 정상 응답을 돌려준다.
"""

from types import SimpleNamespace

import httpx
import openai


def make_status_error(cls=openai.APIStatusError, status: int = 500, message: str = "error", code=None):
    """실제 SDK 예외 인스턴스를 만든다 (httpx 응답 포함)."""
    request = httpx.Request("POST", "https://api.openai.com/v1/images/generations")
    response = httpx.Response(status, request=request)
    body = {"message": message, "code": code} if code else None
    return cls(message, response=response, body=body)


def rate_limit_error():
    return make_status_error(openai.RateLimitError, 429, "Rate limit reached for images")


def content_policy_error():
    return make_status_error(
        openai.BadRequestError,
        400,
        "Your request was rejected as a result of our safety system.",
        code="content_policy_violation",
    )


def auth_error():
    return make_status_error(openai.AuthenticationError, 401, "Incorrect API key provided")


def server_error(message: str = "The server had an error while processing your request."):
    return make_status_error(openai.InternalServerError, 500, message)


class FakeImages:
    def __init__(self):
        self.calls: list[dict] = []
        self.failures: list[Exception] = []
        self.always_fail: Exception | None = None
        self.empty_response = False

    async def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.always_fail is not None:
            raise self.always_fail
        if self.failures:
            raise self.failures.pop(0)
        if self.empty_response:
            return SimpleNamespace(created=1700000000, data=[])

        n = kwargs.get("n", 1)
        return SimpleNamespace(
            created=1700000000,
            data=[
                SimpleNamespace(
                    url=f"https://images.example.com/{len(self.calls)}-{i}.png",
                    revised_prompt=f"revised: {kwargs['prompt']}",
                )
                for i in range(n)
            ],
        )


class FakeCompletions:
    def __init__(self):
        self.calls: list[dict] = []
        self.failures: list[Exception] = []
        self.content: str | None = None

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.failures:
            raise self.failures.pop(0)

        user_prompt = kwargs["messages"][-1]["content"]
        content = self.content
        if content is None:
            content = (
                f"A highly detailed rendering of {user_prompt}, soft golden-hour lighting, "
                "warm muted color palette, centered composition"
            )
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAI:
    def __init__(self):
        self.images = FakeImages()
        self.chat = SimpleNamespace(completions=FakeCompletions())
        self.closed = False

    async def close(self):
        self.closed = True
