import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_504_GATEWAY_TIMEOUT

from nexus.config import create_db, settings
from nexus.errors import NexusError
from nexus.routes.assignment_routes import assignment_routes
from nexus.routes.auth_routes import auth_routes
from nexus.routes.course_routes import course_routes
from nexus.routes.dashboard_routes import dashboard_routes
from nexus.routes.tracking_routes import mastery_routes, progress_routes
from nexus.utils.logger import bound_request_id, configure_logging

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db()
    yield


app = FastAPI(title="Nexus Classroom API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_deadline(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.request_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(
            "request timed out after %ss method=%s path=%s",
            settings.request_timeout_seconds, request.method, request.url.path,
        )
        return JSONResponse(status_code=HTTP_504_GATEWAY_TIMEOUT, content={"error": "Request timed out"})


@app.middleware("http")
async def request_logger(request: Request, call_next):
    with bound_request_id(request.headers.get("x-request-id")) as rid:
        try:
            logger.info("request start method=%s path=%s client=%s", request.method, request.url.path, request.client)
            response: Response = await call_next(request)
            logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        except Exception:
            logger.exception("request error method=%s path=%s", request.method, request.url.path)
            raise
        response.headers["x-request-id"] = rid
        return response


@app.exception_handler(NexusError)
async def nexus_error_handler(request: Request, exc: NexusError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("domain error status=%s method=%s path=%s error=%s", exc.status_code, request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("domain error status=%s method=%s path=%s error=%s", exc.status_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "detail": jsonable_errors(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]


@app.get("/")
def read_root():
    return {"message": "Nexus is Healthy"}


app.include_router(auth_routes, prefix="/auth")
app.include_router(course_routes, prefix="/courses")
app.include_router(assignment_routes, prefix="/assignments")
app.include_router(dashboard_routes, prefix="/dashboard")
app.include_router(mastery_routes, prefix="/mastery")
app.include_router(progress_routes, prefix="/progress")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
