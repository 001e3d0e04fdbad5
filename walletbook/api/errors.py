"""
Mapping of finance errors to HTTP responses
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from walletbook.domain.errors import (
    FinanceValidationError,
    NotFoundError,
    WalletConflictError,
    StepFailedError,
)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FinanceValidationError)
    async def validation_error(request: Request, exc: FinanceValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(WalletConflictError)
    async def conflict(request: Request, exc: WalletConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StepFailedError)
    async def step_failed(request: Request, exc: StepFailedError):
        # A step rejected by the version check is a conflict, anything else a backend failure
        status_code = 409 if isinstance(exc.__cause__, WalletConflictError) else 502
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": str(exc),
                "failed_step": exc.step,
                "completed_steps": exc.completed_steps,
            },
        )
