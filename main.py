import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from app.core.config import settings
from app.core.database import Base, engine
from app.core.exceptions import AppError
from app.core.logging import configure_logging
from app.endpoints import course_type, course, unit, lesson, enrollment, quiz, question, attempt, answer, report
from app.middleware.exceptions import app_error_handler, global_exception_handler, validation_exception_handler
from app.middleware.logging import RequestLoggingMiddleware
from app.models import (  # noqa: F401  registers every table on Base.metadata
    course_type as course_type_model, course as course_model, unit as unit_model, lesson as lesson_model,
    enrollment as enrollment_model, lesson_progress, quiz as quiz_model, question as question_model,
    attempt as attempt_model, answer as answer_model,
)
from app.schemas.response import APIResponse
from app.services.cache_service import cache_service

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(course_type.router, prefix="/course-types", tags=["Course Types"])
app.include_router(course.router, prefix="/courses", tags=["Courses"])
app.include_router(unit.router, prefix="/units", tags=["Units"])
app.include_router(lesson.router, prefix="/lessons", tags=["Lessons"])
app.include_router(enrollment.router, prefix="/enrollments", tags=["Enrollments"])
app.include_router(quiz.router, prefix="/quizzes", tags=["Quizzes"])
app.include_router(question.router, prefix="/questions", tags=["Questions"])
app.include_router(attempt.router, prefix="/attempts", tags=["Attempts"])
app.include_router(answer.router, prefix="/answers", tags=["Answers"])
app.include_router(report.router, prefix="/reports", tags=["Reports"])

@app.on_event("startup")
async def startup_event():
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")

@app.get("/health", response_model=APIResponse, tags=["Health"])
def health():
    cache_ok = cache_service.health_check()
    return APIResponse(
        message="Service is healthy" if cache_ok else "Service is degraded",
        data={"cache": cache_service.get_cache_stats() if cache_ok else {"healthy": False}},
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
