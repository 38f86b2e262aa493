"""FastAPI 애플리케이션 진입점. 로깅, 미들웨어, 예외 핸들러, API 라우터를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from workforce.config import settings
from workforce.database import Base, engine
import workforce.models  # noqa: F401 - 모델 import로 metadata 등록
from workforce.routers import auth, attendance

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Workforce Attendance Service",
    description="근태 세션과 휴식 시간을 집계하는 워크포스 관리 백엔드",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(attendance.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # 클라이언트는 {"error": "..."} 형태를 기대한다.
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Workforce Attendance Service"}
