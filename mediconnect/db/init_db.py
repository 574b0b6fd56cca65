"""
Database initialization script.
"""
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.db.session import SessionLocal, create_tables
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.user import Role, User, UserStatus
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


def seed_admin(db: Session, settings: Settings = default_settings) -> User:
    """Create the first admin account when it does not exist yet."""
    identity = IdentityProvider(db, settings)
    users = UserService(db, identity)

    credential = identity.get_credential_by_email(settings.FIRST_ADMIN_EMAIL)
    if credential is not None:
        existing = users.get_user(credential.id)
        if existing is not None:
            return existing
        user_id = credential.id
    else:
        user_id = identity.create_user(
            settings.FIRST_ADMIN_EMAIL,
            settings.FIRST_ADMIN_PASSWORD,
            {"name": settings.FIRST_ADMIN_NAME, "role": Role.ADMIN.value}
        )

    admin = users.save_user(User(
        id=user_id,
        email=settings.FIRST_ADMIN_EMAIL.lower(),
        name=settings.FIRST_ADMIN_NAME,
        role=Role.ADMIN,
        status=UserStatus.APPROVED,
        created_at=utcnow()
    ))
    logger.info(f"Created default admin user {admin.email}")
    return admin


def init_db(db: Session = None, settings: Settings = default_settings) -> None:
    """Create tables and seed the first admin."""
    logger.info("Initializing database...")
    owns_session = db is None
    db = db or SessionLocal()
    try:
        create_tables(bind=db.get_bind())
        seed_admin(db, settings)
    except Exception as e:
        db.rollback()
        logger.error(f"Error initializing database: {e}")
        raise
    finally:
        if owns_session:
            db.close()
    logger.info("Database initialization completed")


if __name__ == "__main__":
    init_db()
