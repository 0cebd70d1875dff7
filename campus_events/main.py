from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from campus_events.config import settings
from campus_events.database.db import ENGINE, get_ctx_db
from campus_events.database.init_db import create_tables, seed_default_categories
from campus_events.exceptions import CampusEventsError, ValidationError
from campus_events.log import get_logger
from campus_events.router import (
    auth_router,
    events_router,
    students_router,
    attendance_router,
    feedback_router,
    reports_router,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        create_tables(ENGINE)
        with get_ctx_db() as db:
            seed_default_categories(db)
    log.info("%s %s started (%s)", settings.PROJECT_NAME, settings.API_VERSION, settings.ENV)
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(events_router, prefix="/api/events", tags=["Events"])
app.include_router(students_router, prefix="/api/student", tags=["Student"])
app.include_router(attendance_router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(feedback_router, prefix="/api/feedback", tags=["Feedback"])
app.include_router(reports_router, prefix="/api/reports", tags=["Reports"])


##########################
### Exception Handlers ###
##########################
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, CampusEventsError):
        body = exc.to_dict()
    else:
        # routing errors such as unknown paths or methods
        body = {"error": HTTPStatus(exc.status_code).phrase, "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


REQUEST_PARTS = ("body", "query", "path", "header")


def _validation_details(exc: RequestValidationError):
    details = []
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        if loc and loc[0] in REQUEST_PARTS:
            loc = loc[1:]
        if error.get("type") == "json_invalid":
            # loc holds the character offset of the parse failure
            loc = []
        field = ".".join(str(part) for part in loc)
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        details.append({"field": field, "message": message})
    return details


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = _validation_details(exc)
    first = details[0] if details else {"field": "", "message": "Invalid request"}
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    error = ValidationError(message, details=details)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": "An unexpected error occurred"},
    )


#####################
### Root Endpoint ###
#####################
@app.get("/")
def read_root():
    return {
        "name": settings.PROJECT_NAME,
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "OK", "version": settings.API_VERSION}
