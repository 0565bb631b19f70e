from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from yelpcamp.core.security import hash_password
from yelpcamp.db.crud import parse_id
from yelpcamp.db.models import User
from yelpcamp.errors import RegistrationError

def get(db: Session, user_id) -> Optional[User]:
    pk = parse_id(user_id)
    return db.get(User, pk) if pk is not None else None

def get_by_username(db: Session, username: str) -> Optional[User]:
    return db.scalars(select(User).where(User.username == username)).first()

def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email)).first()

def get_by_reset_token(db: Session, token: str, now: datetime | None = None) -> Optional[User]:
    """Only a token that has not expired yet matches."""
    now = now or datetime.utcnow()
    return db.scalars(
        select(User).where(
            User.reset_password_token == token,
            User.reset_password_expires > now,
        )
    ).first()

def register(db: Session, user: User, password: str) -> User:
    username = user.username
    if get_by_username(db, username):
        raise RegistrationError("A user with the given username is already registered")
    user.password_hash = hash_password(password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # lost a race on the username check, or the email is taken
        if get_by_username(db, username):
            raise RegistrationError("A user with the given username is already registered")
        raise RegistrationError("A user with the given email is already registered")
    db.refresh(user)
    return user

def set_password(db: Session, user: User, password: str) -> None:
    user.password_hash = hash_password(password)
    user.reset_password_token = None
    user.reset_password_expires = None
    db.commit()

def set_reset_token(db: Session, user: User, token: str, expires: datetime) -> None:
    user.reset_password_token = token
    user.reset_password_expires = expires
    db.commit()
