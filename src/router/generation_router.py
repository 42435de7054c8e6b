from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from core.dependencies import get_gateway
from model.generation import DEFAULT_SIZE, DEFAULT_STYLE, GenerationRequest, GenerationResult
from service.gateway import GenerationGateway

router = APIRouter(prefix="/api", tags=["generation"])


# --- 요청/응답 스키마 ---
# prompt 기본값을 ""로 두어 누락/빈 값 모두 게이트웨이에서 400 "Prompt is required"로 처리한다


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateImageRequest(_CamelModel):
    prompt: str = ""
    n: int = 1
    size: str = DEFAULT_SIZE
    style: str = DEFAULT_STYLE


class EnhancePromptRequest(_CamelModel):
    prompt: str = ""
    language: str = "en"


class VariationRequest(_CamelModel):
    prompt: str = ""
    n: int = 1
    reference_image_url: str | None = Field(default=None, alias="referenceImageUrl")


class EditImageRequest(_CamelModel):
    image_url: str = Field(default="", alias="imageUrl")
    prompt: str = ""


class ImageData(_CamelModel):
    url: str
    revised_prompt: str | None = Field(default=None, alias="revisedPrompt")


class ImagesResponse(_CamelModel):
    created: int
    data: list[ImageData]


class EnhancePromptResponse(_CamelModel):
    enhanced_prompt: str = Field(alias="enhancedPrompt")


def _to_response(result: GenerationResult) -> ImagesResponse:
    return ImagesResponse(
        created=result.created,
        data=[ImageData(url=img.url, revised_prompt=img.revised_prompt) for img in result.images],
    )


# --- 엔드포인트 ---


@router.post(
    "/generate-image",
    response_model=ImagesResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def generate_image(
    req: GenerateImageRequest, gateway: GenerationGateway = Depends(get_gateway)
):
    """프롬프트 → 이미지 생성 (rate limit 등 실패 시 재시도 후 분류된 에러)."""
    result = await gateway.generate_image(
        GenerationRequest(prompt=req.prompt, size=req.size, style=req.style, n=req.n)
    )
    return _to_response(result)


@router.post("/enhance-prompt", response_model=EnhancePromptResponse, response_model_by_alias=True)
async def enhance_prompt(
    req: EnhancePromptRequest, gateway: GenerationGateway = Depends(get_gateway)
):
    """짧은 설명 → 상세 프롬프트. language: en | ko"""
    enhanced = await gateway.enhance_prompt(req.prompt, req.language)
    return EnhancePromptResponse(enhanced_prompt=enhanced)


@router.post(
    "/image-variations",
    response_model=ImagesResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def create_variation(
    req: VariationRequest, gateway: GenerationGateway = Depends(get_gateway)
):
    result = await gateway.create_variation(
        GenerationRequest(prompt=req.prompt, n=req.n, reference_image_url=req.reference_image_url)
    )
    return _to_response(result)


@router.post(
    "/edit-image",
    response_model=ImagesResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def edit_image(req: EditImageRequest, gateway: GenerationGateway = Depends(get_gateway)):
    result = await gateway.edit_image(req.image_url, req.prompt)
    return _to_response(result)
