from dataclasses import dataclass, field

SUPPORTED_SIZES: tuple[str, ...] = ("1024x1024", "1024x1792", "1792x1024")
SUPPORTED_STYLES: tuple[str, ...] = ("vivid", "natural")

DEFAULT_SIZE = "1024x1024"
DEFAULT_STYLE = "vivid"


@dataclass
class GenerationRequest:
    """이미지 생성 요청. 저장되지 않고 호출 1회 동안만 존재한다."""

    prompt: str
    size: str = DEFAULT_SIZE
    style: str = DEFAULT_STYLE
    n: int = 1
    reference_image_url: str | None = None


@dataclass
class GeneratedImage:
    url: str
    revised_prompt: str | None = None


@dataclass
class GenerationResult:
    created: int
    images: list[GeneratedImage] = field(default_factory=list)
