"""Translation of registry errors into HTTP responses."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from topology_registry.errors import DeploymentError, NotFoundError, ReferentialError, ValidationError
from topology_registry.orchestrator import DeployStage

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=409,
            content={"code": "MissingParameterError", "message": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(ReferentialError)
    async def referential_error_handler(request: Request, exc: ReferentialError):
        return JSONResponse(
            status_code=422,
            content={"code": "InvalidReferenceError", "message": str(exc)},
        )

    @app.exception_handler(DeploymentError)
    async def deployment_error_handler(request: Request, exc: DeploymentError):
        # Provisioner failures are upstream failures; the rest are bad references.
        status_code = 502 if exc.stage == DeployStage.PROVISION else 422
        return JSONResponse(
            status_code=status_code,
            content={"code": "DeploymentError", "stage": exc.stage.value, "message": str(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"code": "ResourceNotFoundError", "message": str(exc)},
        )
