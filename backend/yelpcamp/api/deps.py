from typing import Optional, Union

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from yelpcamp.assets import AssetHost, CloudinaryAssetHost
from yelpcamp.auth import load_user
from yelpcamp.core.config import Settings, get_settings
from yelpcamp.db.crud import campgrounds as campground_crud
from yelpcamp.db.crud import comments as comment_crud
from yelpcamp.db.models import Campground, Comment, User
from yelpcamp.db.session import get_db
from yelpcamp.errors import FlashRedirect
from yelpcamp.mail import Mailer, SmtpMailer

NOT_LOGGED_IN = "You need to be logged in to do that."
NO_PERMISSION = "You don't have permission to do that."

def get_current_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Runs for every request (app-level dependency) and leaves the user on request.state."""
    user = load_user(db, request)
    request.state.user = user
    return user

def get_asset_host(settings: Settings = Depends(get_settings)) -> AssetHost:
    return CloudinaryAssetHost.from_settings(settings)

def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return SmtpMailer(settings)

def is_xhr(request: Request) -> bool:
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"

def can_edit(user: Optional[User], record: Union[Campground, Comment]) -> bool:
    if user is None:
        return False
    return record.author_id == user.id or bool(user.is_admin)

def require_login(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise FlashRedirect("/login", NOT_LOGGED_IN)
    return user

def campground_owner(
    campground_id: str,
    request: Request,
    user: Optional[User] = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Campground:
    if user is None:
        raise FlashRedirect("back", NOT_LOGGED_IN)
    campground = campground_crud.get(db, campground_id)
    if campground is None:
        raise FlashRedirect("back", "Campground not found.")
    if not can_edit(user, campground):
        raise FlashRedirect("back", NO_PERMISSION)
    request.state.campground = campground
    return campground

def comment_owner(
    comment_id: str,
    user: Optional[User] = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Comment:
    if user is None:
        raise FlashRedirect("back", NOT_LOGGED_IN)
    comment = comment_crud.get(db, comment_id)
    if comment is None:
        raise FlashRedirect("back", "Comment not found.")
    if not can_edit(user, comment):
        # same text as the logged-out branch, kept as-is
        raise FlashRedirect("back", NOT_LOGGED_IN)
    return comment
