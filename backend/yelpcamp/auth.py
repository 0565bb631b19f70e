import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from yelpcamp.core.security import verify_password
from yelpcamp.db.crud import users
from yelpcamp.db.models import User
from yelpcamp.errors import AuthError

logger = logging.getLogger(__name__)

SESSION_KEY = "uid"
BAD_CREDENTIALS = "Password or username is incorrect"

def authenticate(db: Session, username: str, password: str) -> User:
    user = users.get_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        logger.info("login failed for %r", username)
        raise AuthError(BAD_CREDENTIALS)
    return user

def login_user(request: Request, user: User) -> None:
    request.session[SESSION_KEY] = user.id

def logout_user(request: Request) -> None:
    request.session.clear()

def load_user(db: Session, request: Request) -> Optional[User]:
    uid = request.session.get(SESSION_KEY)
    if uid is None:
        return None
    user = db.get(User, uid)
    if user is None:
        # account vanished under an old cookie
        request.session.pop(SESSION_KEY, None)
    return user
