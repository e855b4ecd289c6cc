import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api import transactions
from app.core.config import settings
from app.core.errors import LedgerError

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Create the FastAPI application instance (this is what Uvicorn runs).
app = FastAPI(title="Expense Ledger Backend")

# --- CORS configuration ---
# Allow the React table UI (localhost:3000 during development) plus any
# deployed origins listed in CORS_ORIGINS.
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    *settings.cors_origins(),
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],   # allow GET, POST, PUT, DELETE
    allow_headers=["*"],   # allow all request headers
)
# --- end CORS configuration ---

# --- error responses ---
# Services raise LedgerError subclasses; clients always get {"message", "error"?}.
@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

# Wrong types in query/body are a 400 like any other bad input.
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
    )
    return JSONResponse(status_code=400, content={"message": "Invalid request", "error": errors})

# Simple liveness endpoint for containers/monitors (K8s/Compose/health checks).
@app.get("/healthz")
async def health():
    return {"status": "ok"}

app.include_router(transactions.router)
