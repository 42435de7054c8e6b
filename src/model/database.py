from sqlmodel import SQLModel, create_engine

from core.config import settings

# SQLite는 기본적으로 생성한 스레드에서만 커넥션을 쓸 수 있다.
# FastAPI 동기 엔드포인트는 스레드풀에서 돌기 때문에 check_same_thread를 끈다.
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False},
)


def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)
