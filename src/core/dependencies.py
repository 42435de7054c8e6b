from fastapi import Depends, Request

from service.coordinator import SessionCoordinator
from service.gateway import GenerationGateway
from service.image_store import LocalImageStore

# lifespan에서 app.state에 올려둔 싱글턴을 꺼낸다.
# 테스트에서는 app.dependency_overrides로 가짜 게이트웨이/인메모리 저장소를 주입한다.


def get_gateway(request: Request) -> GenerationGateway:
    return request.app.state.gateway


def get_store(request: Request) -> LocalImageStore:
    return request.app.state.image_store


def get_coordinator(
    gateway: GenerationGateway = Depends(get_gateway),
    store: LocalImageStore = Depends(get_store),
) -> SessionCoordinator:
    return SessionCoordinator(gateway, store)
