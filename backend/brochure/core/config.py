"""
애플리케이션 설정 관리
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 기본 설정
    PROJECT_NAME: str = "Brochure Designer"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API 설정
    API_V1_STR: str = "/api/v1"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS 설정
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000"
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 데이터베이스 설정
    DATABASE_URL: str = "sqlite+aiosqlite:///./brochure.db"
    SEED_DEMO_DATA: bool = True

    # 파일 설정 (업로드 자체는 외부 협력자, 경로만 사용)
    MAX_UPLOAD_SIZE: int = 50 * 1024 * 1024  # 50MB
    UPLOAD_DIR: str = "uploads"

    # 캔버스 설정
    CANVAS_WIDTH: int = 600
    CANVAS_HEIGHT: int = 800
    DESIGN_CANVAS_WIDTH: int = 400
    DESIGN_CANVAS_HEIGHT: int = 533
    MAX_PAGES: int = 6

    # 자동 레이아웃 디바운스 (밀리초)
    AUTO_LAYOUT_DEBOUNCE_MS: int = 50
    DESIGN_MODE_LAYOUT_DELAY_MS: int = 100

    # 내보내기 해상도 배수
    EXPORT_SCALE: int = 2

    @field_validator("MAX_PAGES", "EXPORT_SCALE")
    @classmethod
    def ensure_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("1 이상이어야 합니다")
        return v

    # 로깅 설정 (LOG_FORMAT: text | json, 운영 환경은 항상 json)
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    DEBUG_GESTURES: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


# 설정 인스턴스 생성
settings = Settings()
