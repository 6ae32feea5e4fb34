import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.domain.errors import ErrorCode
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code.value, "message": exc.base_error.message}
    if exc.base_error.fields:
        error_dict["fields"] = exc.base_error.fields
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {
        "code": exc.base_error.code.value,
        "message": "the server encountered a problem and could not process your request",
    }
    logger.error(
        f"Server error: {exc.base_error.code.value} ({exc.base_error.message}) "
        f"on {request.method} {request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Malformed or wrongly typed request bodies, rejected before any use case runs."""
    fields = {}
    for err in exc.errors():
        name = str(err["loc"][-1]) if err.get("loc") else "body"
        fields.setdefault(name, err.get("msg", "invalid value"))
    error_dict = {
        "code": ErrorCode.VALIDATION_ERROR.value,
        "message": "the request body could not be parsed",
        "fields": fields,
    }
    logger.warning(f"Malformed request on {request.method} {request.url.path}: {fields}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error_dict})


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.dispatcher.shutdown()

    app = FastAPI(title="Greenlight", version=ApplicationConfig.VERSION, lifespan=lifespan)
    app.state.config = ApplicationConfig
    app.state.token_issuer = SessionTokenIssuer.from_config(ApplicationConfig)
    app.state.dispatcher = BackgroundDispatcher(
        max_concurrency=ApplicationConfig.BACKGROUND_MAX_CONCURRENCY
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from greenlight.api.routes import health_check, tokens, users

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    app.include_router(tokens.router, prefix=prefix, tags=["Tokens"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    return app
