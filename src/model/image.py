from pydantic import BaseModel, ConfigDict, Field


class NewImage(BaseModel):
    """저장 전 이미지 (id, timestamp는 저장소가 부여)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str
    prompt: str
    enhanced_prompt: str | None = Field(default=None, alias="enhancedPrompt")


class ImageRecord(NewImage):
    """로컬 저장소에 저장된 생성 이미지 1건.

    생성 후에는 변경하지 않는다 (frozen). "수정"은 새 레코드를 만든다.
    timestamp는 epoch milliseconds.
    """

    id: str
    timestamp: int

    def to_storage(self) -> dict:
        # enhancedPrompt는 향상 단계를 거친 경우에만 기록한다
        return self.model_dump(by_alias=True, exclude_none=True)
