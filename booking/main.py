import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from booking.core import config
from booking.core.errors import BookingError, StoreIOError
from booking.notifications.dispatcher import NotificationDispatcher
from booking.routes import admin_routes, appointment_routes, availability_routes
from booking.scheduler import SweepScheduler
from booking.services.admin import get_admin_token
from booking.store import build_store, init_store

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.exception_handler(BookingError)
async def handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    if isinstance(exc, StoreIOError):
        logger.error('Store failure on %s during %s %s: %s', exc.collection, request.method, request.url.path, exc.reason)
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.message})


@app.on_event('startup')
def initialize_store() -> None:
    config.validate_runtime_config()

    store = None
    try:
        store = build_store()
        init_store(store)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')
    except StoreIOError:
        logger.exception('Store initialization failed. Check DATA_DIR or DATABASE_URL.')

    app.state.store = store
    app.state.dispatcher = NotificationDispatcher(
        admin_url_provider=lambda: f"{config.ADMIN_BASE_URL.rstrip('/')}/{get_admin_token(store).token}",
    )
    app.state.scheduler = None

    if config.SWEEP_ENABLED and store is not None:
        app.state.scheduler = SweepScheduler(store)
        app.state.scheduler.start()


@app.on_event('shutdown')
def stop_scheduler() -> None:
    scheduler = getattr(app.state, 'scheduler', None)
    if scheduler is not None:
        scheduler.stop()


@app.get('/api/health')
def health():
    return {'status': 'OK', 'timestamp': datetime.now().isoformat()}


app.include_router(availability_routes.router, prefix='/api/availabilities')
app.include_router(appointment_routes.router, prefix='/api/appointments')
app.include_router(admin_routes.router, prefix='/api/admin')
