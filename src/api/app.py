"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import mortgage
from src.config import settings
from src.engine.errors import MortgageCalculationError, NonConvergenceError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mortgage Engine",
    description="Mortgage payment, amortization, APR and loan comparison API",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mortgage.router)


@app.exception_handler(MortgageCalculationError)
async def calculation_error_handler(request: Request, exc: MortgageCalculationError):
    status_code = 422 if isinstance(exc, NonConvergenceError) else 400
    logger.warning("%s on %s: %s", exc.kind, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.kind, "message": str(exc)},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
