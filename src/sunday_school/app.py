"""
Sunday School Management API Server
Core functionality: Children, Teachers, Sunday Records, Events and Reports
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sunday_school.config.settings import ALLOWED_ORIGINS
from sunday_school.database.connection import init_database, close_database
from sunday_school.api.routes import health, children, teachers, sunday_records, events, reports
from sunday_school.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    await init_database()
    yield
    await close_database()

# FastAPI app initialization
app = FastAPI(
    title="Sunday School Management API",
    description="Backend API for children, teachers, Sunday records, events and attendance reports",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

@app.get("/", tags=["Info"])
async def root():
    """Service information"""
    return {
        "message": "Sunday School Management API",
        "version": app.version,
        "endpoints": {
            "children": "/api/children",
            "teachers": "/api/teachers",
            "sundayRecords": "/api/sunday-records",
            "events": "/api/events",
            "reports": "/api/reports",
            "health": "/health",
        }
    }

# Include API routes
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(children.router, prefix="/api/children", tags=["Children"])
app.include_router(teachers.router, prefix="/api/teachers", tags=["Teachers"])
app.include_router(sunday_records.router, prefix="/api/sunday-records", tags=["Sunday Records"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])

# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
