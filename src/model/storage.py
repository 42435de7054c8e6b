from sqlmodel import Field, SQLModel


class StorageEntry(SQLModel, table=True):
    """브라우저 localStorage와 같은 key → 문자열 값 저장 테이블."""

    __tablename__ = "storage_entry"

    key: str = Field(primary_key=True)
    value: str
