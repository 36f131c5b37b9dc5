"""
브로셔 디자이너 메인 FastAPI 애플리케이션
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from brochure.api.v1.api import api_router
from brochure.core.config import settings
from brochure.core.exception_handlers import (
    brochure_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from brochure.core.exceptions import BrochureException
from brochure.core.responses import create_health_response, create_success_response
from brochure.db.seed import seed_demo_data
from brochure.db.session import AsyncSessionLocal, init_models
from brochure.middleware.logging_middleware import LoggingMiddleware
from brochure.services.brochure_editor_service import editor_session_manager
from brochure.utils.logger import get_logger

logger = get_logger(__name__)

# 서버 시작 시간 기록
server_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    logger.info(
        "브로셔 디자이너 서버 시작",
        context={"environment": settings.ENVIRONMENT, "debug": settings.DEBUG}
    )

    await init_models()
    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)

    yield

    # 열린 에디터 세션의 위치 저장 후 예약 작업 정리
    await editor_session_manager.shutdown()
    logger.info("브로셔 디자이너 서버 종료", context={"uptime": time.time() - server_start_time})


# FastAPI 애플리케이션 생성
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="상품 브로셔 디자이너 레이아웃 엔진 API",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs" if settings.DEBUG else None,
    redoc_url=f"{settings.API_V1_STR}/redoc" if settings.DEBUG else None,
    lifespan=lifespan
)

# 미들웨어 추가
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 예외 처리기 등록
app.add_exception_handler(BrochureException, brochure_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return create_success_response(
        message="브로셔 디자이너 API에 오신 것을 환영합니다",
        data={
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "status": "healthy"
        }
    )


@app.get("/health")
async def health_check():
    """헬스 체크 엔드포인트"""
    return create_health_response(
        status="healthy",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        uptime=time.time() - server_start_time,
        services={"editor_sessions": f"healthy ({len(editor_session_manager)} open)"}
    )


# API v1 라우터 포함
app.include_router(api_router, prefix=settings.API_V1_STR)

# 업로드 파일 (템플릿/로고 이미지) 서빙
uploads_dir = Path(settings.UPLOAD_DIR)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "brochure.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
