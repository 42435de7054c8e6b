from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "dallespace"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    SLOW_REQUEST_MS: int = 500

    # 로컬 이미지 저장소 (key-value 테이블 1개)
    DATABASE_URL: str = "sqlite:///./dallespace.db"
    STORAGE_KEY: str = "dallespace-images"

    # OpenAI 설정
    OPENAI_API_KEY: str | None = None
    OPENAI_TIMEOUT: float = 120.0
    IMAGE_MODEL: str = "dall-e-3"
    TEXT_MODEL: str = "gpt-4o"
    ENHANCE_TEMPERATURE: float = 0.7
    ENHANCE_MAX_TOKENS: int = 300

    # 재시도 설정 (rate limit이면 대기 시간 x3)
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_DELAY_MS: int = 2000

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
