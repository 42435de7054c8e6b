"""pytest 공용 fixture.

모든 테스트는 in-memory SQLite 저장소와 가짜 OpenAI 클라이언트를 사용하여 격리된다.
- fake_openai: 호출 기록 + 실패 주입이 가능한 가짜 클라이언트
- sleeps: 재시도 대기 시간(초) 기록 (실제로 기다리지 않음)
- gateway / store: 위 두 가지로 만든 게이트웨이, 저장소
- client: get_gateway / get_store를 오버라이드한 TestClient
- lenient_client: 같은 오버라이드, 서버 예외를 500 응답으로 받는다
"""

import os
import sys
from pathlib import Path

# settings는 import 시점에 읽히므로 앱을 import하기 전에 환경을 고정한다
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from core.dependencies import get_gateway, get_store
from fakes import FakeOpenAI
from main import app
from service.coordinator import SessionCoordinator
from service.gateway import GenerationGateway
from service.image_store import LocalImageStore, SqlKeyValueStorage

DELAY_MS = 1000


@pytest.fixture()
def engine():
    """테스트마다 새 in-memory SQLite DB를 생성한다.

    StaticPool을 사용해야 모든 커넥션이 같은 in-memory DB를 공유한다.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture()
def storage(engine):
    return SqlKeyValueStorage(engine)


@pytest.fixture()
def store(storage):
    return LocalImageStore(storage, key="test-images")


@pytest.fixture()
def fake_openai():
    return FakeOpenAI()


@pytest.fixture()
def sleeps():
    return []


@pytest.fixture()
def gateway(fake_openai, sleeps):
    async def fake_sleep(seconds: float):
        sleeps.append(seconds)

    return GenerationGateway(fake_openai, max_retries=3, delay_ms=DELAY_MS, sleep=fake_sleep)


@pytest.fixture()
def coordinator(gateway, store):
    return SessionCoordinator(gateway, store)


@pytest.fixture()
def client(gateway, store):
    """게이트웨이/저장소를 테스트용으로 오버라이드한 TestClient."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def lenient_client(gateway, store):
    """처리되지 않은 예외를 다시 던지지 않고 500 응답으로 돌려받는 TestClient."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
