"""FastAPI application exposing the action entry points over HTTP."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from slack_dm_action.config import get_settings
from slack_dm_action.errors import ActionError, ErrorKind
from slack_dm_action.handler import get_action
from slack_dm_action.logging_config import configure_logging
from slack_dm_action.models import ExecutionContext

logger = logging.getLogger(__name__)


class InvokeRequest(BaseModel):
    """Body of /invoke and /halt: job parameters plus execution context."""

    params: dict
    context: ExecutionContext = ExecutionContext()


class ReportedError(BaseModel):
    """A prior invocation's error as reported by the framework."""

    message: str
    kind: ErrorKind | None = None
    status_code: int | None = None

    def to_exception(self) -> Exception:
        """Rebuild an exception the error handler can classify."""
        if self.kind is not None:
            return ActionError(self.message, self.kind, status_code=self.status_code)
        return Exception(self.message)


class ErrorRequest(InvokeRequest):
    """Body of /error."""

    error: ReportedError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load config and configure logging on startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    yield


app = FastAPI(
    title="Slack Direct Message Action",
    lifespan=lifespan,
)


@app.exception_handler(ActionError)
async def action_error_handler(request: Request, exc: ActionError) -> JSONResponse:
    """Map ActionError to 422 when fatal by kind, 502 otherwise."""
    logger.warning("Action failed: %s", exc, extra={"kind": exc.kind.value, "path": request.url.path})
    return JSONResponse(
        status_code=422 if exc.fatal else 502,
        content={"error": exc.message, "kind": exc.kind.value, "status_code": exc.status_code},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Malformed job parameters are a caller error."""
    return JSONResponse(status_code=422, content={"error": str(exc)})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "slack-dm-action",
        "version": "0.1.0",
    }


@app.post("/invoke")
async def invoke_endpoint(body: InvokeRequest):
    """Look up the user by email and send the direct message."""
    result = await get_action().invoke(body.params, body.context)
    return result.model_dump(by_alias=True)


@app.post("/error")
async def error_endpoint(body: ErrorRequest):
    """Classify a prior failure; 422 means the framework must not retry."""
    params = {**body.params, "error": body.error.to_exception()}
    try:
        result = await get_action().error(params, body.context)
    except Exception as exc:
        return JSONResponse(status_code=422, content={"error": str(exc), "retry": False})
    return result.model_dump()


@app.post("/halt")
async def halt_endpoint(body: InvokeRequest):
    """Acknowledge a halt."""
    result = await get_action().halt(body.params, body.context)
    return result.model_dump(by_alias=True)
