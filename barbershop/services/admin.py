import logging
from sqlalchemy.orm import Session

from ..core import security
from ..db import models

logger = logging.getLogger(__name__)


def ensure_admin_exists(session: Session, email: str, password: str, name: str = "Admin") -> None:
    email = email.strip().lower()
    admin = session.query(models.User).filter_by(email=email).first()
    if admin:
        if not security.verify_password(password, admin.password_hash):
            admin.password_hash = security.get_password_hash(password)
            session.commit()
            logger.info("Updated default admin user '%s'", email)
        else:
            logger.info("Admin user '%s' already exists", email)
        return

    admin = models.User(
        name=name,
        email=email,
        password_hash=security.get_password_hash(password),
    )
    session.add(admin)
    session.commit()
    logger.info("Created default admin user '%s'", email)
