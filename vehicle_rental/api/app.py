"""
FastAPI application factory.

* Registers routes for auth, users, vehicles and bookings.
* Maps tagged domain errors to HTTP status codes.
* Disposes the database engine on shutdown via lifespan events.
* Applies rate-limiting and request-logging middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from vehicle_rental.api.errors import register_error_handlers
from vehicle_rental.api.middleware import limiter, log_requests
from vehicle_rental.api.routes import auth, bookings, health, users, vehicles
from vehicle_rental.config import settings
from vehicle_rental.infrastructure.database import dispose_engine

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled database connections on shutdown."""
    logger.info("Vehicle rental API starting")
    yield
    await dispose_engine()
    logger.info("Vehicle rental API stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Vehicle Rental Booking API",
        description=(
            "Manages users, vehicles and bookings with role-based access. "
            "Bookings price themselves from the vehicle's daily rate and keep "
            "each vehicle's availability in step with its active booking."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_error_handlers(app)
    app.middleware("http")(log_requests)

    # Routers
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(vehicles.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")

    return app
