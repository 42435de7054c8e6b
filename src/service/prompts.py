"""프롬프트 향상(enhance)용 시스템 지시문과 이미지 요청 문장 템플릿.

지시문은 버전이 붙은 고정 상수다. 내용을 바꾸면 ENHANCE_TEMPLATE_VERSION도 올린다.
"원래 주제/의도 유지, 새 주요 요소 추가 금지"는 모델에 대한 요청일 뿐
코드로 강제되지 않는다 (best-effort).
"""

ENHANCE_TEMPLATE_VERSION = "1"

DEFAULT_LANGUAGE = "en"

ENHANCE_INSTRUCTIONS: dict[str, str] = {
    "en": (
        "You are an expert at turning brief image descriptions into detailed, "
        "effective prompts for DALL-E 3. Enhance the user's prompt while maintaining "
        "their original idea by adding: 1) more visual details, 2) style, mood, and "
        "lighting descriptions, 3) color palette, and 4) composition and perspective "
        "when appropriate. Don't drastically change the content or add major elements "
        "not mentioned by the user."
    ),
    # DALL-E 프롬프트는 영어가 가장 잘 동작하므로 한국어 입력도 영어로 출력시킨다
    "ko": (
        "당신은 사용자의 짧은 이미지 설명을 받아 DALL-E 3에 적합한 상세하고 명확한 "
        "프롬프트로 변환하는 전문가입니다. 원래 아이디어를 유지하면서 다음을 추가하세요: "
        "1) 더 자세한 시각적 세부 사항, 2) 스타일, 분위기, 조명에 대한 설명, "
        "3) 색상 팔레트, 4) 적절한 경우 구도와 시점. 단, 내용을 지나치게 변경하거나 "
        "사용자가 언급하지 않은 주요 요소를 추가하지 마세요. 영어로 출력하세요."
    ),
}

SUPPORTED_LANGUAGES: tuple[str, ...] = tuple(ENHANCE_INSTRUCTIONS)


def enhance_instruction(language: str) -> str:
    return ENHANCE_INSTRUCTIONS[language]


def variation_prompt(prompt: str, reference_image_url: str | None) -> str:
    """참조 이미지가 있으면 변경 사항을 설명하는 문장으로 감싼다.

    DALL-E 3에는 편집/변형 API가 없어서 항상 새로 생성된다.
    참조 이미지와 픽셀 단위로 이어지지 않는다.
    """
    if not reference_image_url:
        return prompt
    return (
        f"Create a variation of this image concept ({reference_image_url}), "
        f"with these changes: {prompt}. "
        "Maintain the same style and composition but with the requested modifications."
    )


def edit_prompt(image_url: str, prompt: str) -> str:
    return f"Based on this image concept ({image_url}), {prompt}"
