import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import CORS_ORIGINS, LOG_FILE, LOG_LEVEL
from .database import create_tables
from .logging_config import setup_logging
from .routers import tasks

setup_logging(LOG_LEVEL, LOG_FILE)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Todo Tracker API",
    description="Personal task tracker: create, list, toggle, update and delete todos",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tasks.router, prefix="/api", tags=["tasks"])

# Create tables on startup
@app.on_event("startup")
def on_startup():
    create_tables()
    logger.info("Task store ready")

@app.exception_handler(SQLAlchemyError)
async def store_failure_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Task store unavailable"})

@app.get("/")
def read_root():
    return {"message": "Todo Tracker API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
