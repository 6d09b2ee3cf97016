# /codelab_store/main.py

# --- Core FastAPI Imports ---
import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

# --- Application-specific Router Imports ---
from .routers import users_router, submissions_router, courses_router

# --- Persistence Imports for Startup/Shutdown Logic ---
from .core.config import LOG_LEVEL
from .core.exceptions import StoreUnavailableError, SubmissionStoreError
from .db.connection import connection_manager

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # The connection is established lazily by the first request.
    yield
    # This code runs ONCE when the application shuts down.
    connection_manager.close()

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="CodeLab Store API",
    description="Persistence for accounts, sandbox environments, course rosters and submissions.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Error Translation ---
@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})

@app.exception_handler(SubmissionStoreError)
async def submission_store_error_handler(request: Request, exc: SubmissionStoreError):
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})

# --- API Router Inclusion ---
app.include_router(users_router.router, prefix="/api/users", tags=["Users"])
app.include_router(submissions_router.router, prefix="/api/submissions", tags=["Submissions"])
app.include_router(courses_router.router, prefix="/api/courses", tags=["Courses"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "CodeLab Store is running!", "version": app.version}
