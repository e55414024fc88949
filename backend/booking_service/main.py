# booking_service/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from booking_service.core.config import get_settings
from booking_service.core.errors import register_error_handlers

#Import Routers
from booking_service.api.v1 import auth
from booking_service.api.v1 import bookings
from booking_service.api.v1 import employers
from booking_service.api.v1 import users

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Booking Management API",
    description="Booking confirmation, webhooks and video integrations for coaches",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

#Include routers
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(employers.router, prefix="/employers", tags=["employers"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Booking Management API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": os.getenv("APP_ENV", "unknown"),
        "video": "twilio_video" if settings.twilio else None,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "booking_service.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", 8000)),
        reload=True
    )
