import re
from typing import Optional

from sqlalchemy.orm import Session

from app.core import security
from app.core.logging import setup_logger
from app.models import user as user_model

logger = setup_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@]+@[^@]+\.[^@]+$")
MIN_PASSWORD_LENGTH = 8

def get_user_by_email(db: Session, email: str) -> Optional[user_model.User]:
    return db.query(user_model.User).filter(user_model.User.email == email).first()

def authenticate_user(db: Session, email: str, password: str) -> Optional[user_model.User]:
    user = get_user_by_email(db, email)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user

def create_user(db: Session, email: str, password: str, name: Optional[str] = None, role: str = user_model.ROLE_PLAYER) -> user_model.User:
    if get_user_by_email(db, email):
        raise ValueError(f"User with email {email} already exists.")
    user = user_model.User(
        email=email,
        name=name,
        hashed_password=security.get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def ensure_admin(db: Session, email: Optional[str], password: Optional[str], name: str = "Admin") -> str:
    """
    Make sure an administrator account exists for `email`.

    An existing account is promoted to ADMIN instead of being duplicated; its
    password is left alone. Returns a short description of what happened.
    Raises ValueError for missing or malformed credentials.
    """
    if not email or not password:
        raise ValueError("ADMIN_EMAIL and ADMIN_PASSWORD must be set.")
    if not EMAIL_PATTERN.match(email):
        raise ValueError("ADMIN_EMAIL does not look like a valid email address.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"ADMIN_PASSWORD should be at least {MIN_PASSWORD_LENGTH} characters.")

    existing = get_user_by_email(db, email)
    if existing:
        if existing.role != user_model.ROLE_ADMIN:
            existing.role = user_model.ROLE_ADMIN
            db.commit()
            logger.info(f"Promoted {email} to ADMIN")
            return f"Updated user {email} to ADMIN role."
        return f"Admin user {email} already exists."

    create_user(db, email=email, password=password, name=name, role=user_model.ROLE_ADMIN)
    logger.info(f"Created admin user {email}")
    return f"Created admin user: {email}"
