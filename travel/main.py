import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from travel.config import settings
from travel.database import Base, engine
from travel.exceptions import TravelError
from travel.auth import router as auth_router
from travel.locations import router as locations_router
from travel.tours import router as tours_router
from travel.lodges import router as lodges_router
from travel.transports import router as transports_router
from travel.bookings import router as bookings_router
from travel.payments import router as payments_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Travel Booking System API",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(TravelError)
async def travel_error_handler(request: Request, exc: TravelError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    locations_router.router,
    prefix=f"{settings.API_V1_STR}/locations",
    tags=["Locations"]
)

app.include_router(
    tours_router.router,
    prefix=f"{settings.API_V1_STR}/tours",
    tags=["Tours"]
)

app.include_router(
    lodges_router.router,
    prefix=f"{settings.API_V1_STR}/lodges",
    tags=["Lodges"]
)

app.include_router(
    transports_router.router,
    prefix=f"{settings.API_V1_STR}/transports",
    tags=["Transports"]
)

app.include_router(
    bookings_router.router,
    prefix=f"{settings.API_V1_STR}/bookings",
    tags=["Bookings"]
)

app.include_router(
    payments_router.router,
    prefix=f"{settings.API_V1_STR}/payments",
    tags=["Payments"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Travel Booking System API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
