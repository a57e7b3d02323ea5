# db/init.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

# ---- Database engine & Session ----
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./servicehub.db")

DEFAULT_CATEGORIES = ["Electrician", "Plumber", "Carpenter", "House Cleaning", "Painting"]


def make_engine(url: str, **kwargs):
    """
    Build an engine for ``url``. SQLite needs cross-thread access for the
    FastAPI threadpool and does not enforce foreign keys unless asked to.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    eng = create_engine(url, **kwargs)

    if eng.dialect.name == "sqlite":
        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ---- Base for ORM models ----
Base = declarative_base()


# ---- DB session dependency ----
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---- Initialization & optional seeding ----
def init_db(seed: bool = True, bind=None):
    """
    Imports all model modules to register tables, creates them,
    and (optionally) seeds the default categories and admin account.
    """
    # Import models so their metadata is registered on Base
    from models import (  # noqa: F401
        user,
        service_category,
        service_request,
    )

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    if seed:
        session_factory = sessionmaker(autocommit=False, autoflush=False, bind=bind)
        db = session_factory()
        try:
            seed_defaults(db)
        finally:
            db.close()


def seed_defaults(db):
    """
    Insert the default service categories and one admin account if they
    do not already exist. Uses utils.security.hash_password.
    """
    from models.user import User, ROLE_ADMIN
    from models.service_category import ServiceCategory
    from utils.security import hash_password

    created = 0
    for name in DEFAULT_CATEGORIES:
        if not db.query(ServiceCategory).filter(ServiceCategory.name == name).first():
            db.add(ServiceCategory(name=name))
            created += 1

    admin_username = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    if not User.by_username(db, admin_username):
        db.add(
            User(
                username=admin_username,
                password_hash=hash_password(os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")),
                role=ROLE_ADMIN,
            )
        )
        logger.info("Seeded default admin account %r", admin_username)

    db.commit()
    if created:
        logger.info("Seeded %d default service categories", created)
