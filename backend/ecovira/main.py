import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecovira.config import settings
from ecovira.errors import ConfigurationError, CurrencyMismatchError, PricingError, ValidationError

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "ecovira.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from ecovira.data.extras_pricing import load_extras_pricing
from ecovira.routers import bookings, payments, quote
from ecovira.services.demo_booking import DemoBookingFactory, DemoBookingRepository
from ecovira.services.extras_calculator import ExtrasCalculator
from ecovira.services.quote_builder import QuoteBuilder

logger = logging.getLogger(__name__)

# HTTP status per pricing error kind
_ERROR_STATUS: dict[type[PricingError], int] = {
    ValidationError: 400,
    CurrencyMismatchError: 400,
    ConfigurationError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: pricing table is loaded once and shared by reference
    pricing = load_extras_pricing(settings.extras_pricing_file or None)
    calculator = ExtrasCalculator(pricing)
    quote_builder = QuoteBuilder(calculator)

    app.state.extras_pricing = pricing
    app.state.quote_builder = quote_builder
    app.state.demo_booking_factory = DemoBookingFactory(
        quote_builder,
        default_currency=settings.default_currency,
        departure_offset_hours=settings.demo_departure_offset_hours,
        flight_base_fare=settings.demo_flight_base_fare,
    )
    app.state.demo_booking_repository = DemoBookingRepository(settings.demo_booking_store_limit)
    logger.info(
        f"Pricing ready: {len(pricing.seats)} cabins, {len(pricing.baggage)} bag types, "
        f"demo mode {'on' if settings.demo_mode_enabled else 'off'}"
    )

    yield


app = FastAPI(
    title=settings.app_name,
    description="Travel booking pricing, payment routing and demo bookings",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    status = _ERROR_STATUS.get(type(exc), 400)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=status, content={"ok": False, "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"ok": False, "error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": exc.detail})


app.include_router(quote.router, prefix="/api", tags=["quote"])
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "ecovira"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
