import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from .api.routes import auth, availability, blocked_slots, bookings, misc, notifications, users
from .db.session import Base, engine, SessionLocal
from .config import get_settings
from .services.admin import ensure_admin_exists

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Chaxx Barbershop Booking API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(availability.router, prefix="/api/v1")
app.include_router(blocked_slots.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")
app.include_router(misc.router, prefix="/api/v1")


@app.on_event("startup")
def startup_event() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        with SessionLocal() as session:
            ensure_admin_exists(session, settings.default_admin_email, settings.default_admin_password)
    except SQLAlchemyError:
        logger.exception("Database initialization failed. Check DATABASE_URL and Postgres credentials.")
        raise
