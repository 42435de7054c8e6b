from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from core.dependencies import get_coordinator, get_store
from core.exceptions import ImageNotFound
from model.generation import DEFAULT_SIZE, DEFAULT_STYLE
from model.image import ImageRecord
from service.coordinator import SessionCoordinator, Submission
from service.image_store import LocalImageStore

router = APIRouter(prefix="/api/images", tags=["images"])


class CreateImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    size: str = DEFAULT_SIZE
    style: str = DEFAULT_STYLE
    enhance: bool = False
    language: str = "en"
    enhanced_prompt: str | None = Field(default=None, alias="enhancedPrompt")


class CreateVariationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    reference_image_url: str | None = Field(default=None, alias="referenceImageUrl")


# ImageRecord는 저장 형식과 같은 camelCase로 내보낸다
_record_response = dict(
    response_model_by_alias=True,
    response_model_exclude_none=True,
)


@router.post(
    "",
    response_model=ImageRecord,
    status_code=status.HTTP_201_CREATED,
    **_record_response,
)
async def create_image(
    req: CreateImageRequest, coordinator: SessionCoordinator = Depends(get_coordinator)
):
    """향상(선택) → 생성 → 저장. 저장된 레코드를 반환한다."""
    submission = Submission(
        prompt=req.prompt,
        size=req.size,
        style=req.style,
        enhance=req.enhance,
        language=req.language,
        enhanced_prompt=req.enhanced_prompt,
    )
    return await coordinator.run(submission)


@router.post(
    "/variations",
    response_model=ImageRecord,
    status_code=status.HTTP_201_CREATED,
    **_record_response,
)
async def create_variation(
    req: CreateVariationRequest, coordinator: SessionCoordinator = Depends(get_coordinator)
):
    submission = Submission(prompt=req.prompt, reference_image_url=req.reference_image_url)
    return await coordinator.run_variation(submission)


@router.get("", response_model=list[ImageRecord], **_record_response)
def list_images(store: LocalImageStore = Depends(get_store)):
    """최신순 목록. 저장 데이터가 깨져 있으면 빈 목록."""
    return store.get_all()


@router.get("/{image_id}", response_model=ImageRecord, **_record_response)
def get_image(image_id: str, store: LocalImageStore = Depends(get_store)):
    return store.get_or_raise(image_id)


@router.delete("/{image_id}")
def delete_image(image_id: str, coordinator: SessionCoordinator = Depends(get_coordinator)):
    if not coordinator.delete(image_id):
        raise ImageNotFound
    return {"deleted": True}


@router.delete("")
def clear_images(coordinator: SessionCoordinator = Depends(get_coordinator)):
    coordinator.clear()
    return {"cleared": True}
