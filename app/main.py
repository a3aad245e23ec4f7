# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.routers import auth, semester_registration, student_semester_registration_course

# 讓 create_all 看得到所有資料表
from app.models import (  # noqa: F401
    academic_department,
    academic_semester,
    building,
    course,
    offered_course,
    semester_registration as semester_registration_model,
    student,
    student_enrolled_course,
    student_semester_payment,
    student_semester_registration,
    user,
)

import time
import logging
from fastapi import Request
from app.logging_config import setup_logging


setup_logging()
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 建立資料表（若不存在）
    Base.metadata.create_all(bind=engine)
    logger.info("database ready")
    yield


app = FastAPI(title="University Semester Registration Backend", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
        return response
    except Exception:
        ms = int((time.time() - start) * 1000)
        logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
        raise


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(semester_registration.router)
app.include_router(student_semester_registration_course.router)

@app.get("/")
def root():
    return {"message": "University backend is running!"}
