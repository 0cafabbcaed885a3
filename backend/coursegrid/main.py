from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursegrid.api.routes import courses, enrollments, health, schedules, sync, users
from coursegrid.core.config import get_settings
from coursegrid.core.exceptions import AppError
from coursegrid.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(users.router, prefix=settings.api_prefix, tags=["users"])
app.include_router(courses.router, prefix=f"{settings.api_prefix}/courses", tags=["courses"])
app.include_router(enrollments.router, prefix=settings.api_prefix, tags=["enrollments"])
app.include_router(schedules.router, prefix=settings.api_prefix, tags=["schedules"])
app.include_router(sync.router, prefix=settings.api_prefix, tags=["sync"])
