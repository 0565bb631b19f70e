import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from yelpcamp.api.deps import get_asset_host, get_db, require_login
from yelpcamp.assets import AssetHost, validate_image_filename
from yelpcamp.auth import authenticate, login_user, logout_user
from yelpcamp.core.config import Settings, get_settings
from yelpcamp.db.crud import users
from yelpcamp.db.models import User
from yelpcamp.errors import AssetHostError, AuthError, RegistrationError
from yelpcamp.flash import flash, redirect
from yelpcamp.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def is_admin_code(code: Optional[str], settings: Settings) -> bool:
    return bool(settings.ADMIN_CODE) and code == settings.ADMIN_CODE


@router.get("/register")
def register_form(request: Request):
    return render(request, "register.html", {"page": "register"})


@router.post("/register")
async def register(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    email: str = Form(...),
    first_name: str = Form(""),
    last_name: str = Form(""),
    bio: str = Form(""),
    admin_code: str = Form(""),
    image: Optional[UploadFile] = File(None),
    host: AssetHost = Depends(get_asset_host),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    image_url = image_id = None
    if image is not None and image.filename:
        validate_image_filename(image.filename)
        try:
            asset = host.upload(image.filename, await image.read())
        except AssetHostError as e:
            return render(request, "register.html", {"page": "register", "error": str(e)})
        image_url, image_id = asset.url, asset.asset_id

    new_user = User(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        bio=bio,
        image=image_url,
        image_id=image_id,
        is_admin=is_admin_code(admin_code, settings),
    )
    try:
        user = users.register(db, new_user, password)
    except RegistrationError as e:
        return render(request, "register.html", {"page": "register", "error": str(e)})

    logger.info("registered %s (admin=%s)", user.username, user.is_admin)
    login_user(request, user)
    flash(request, "success", f"Welcome to YelpCamp {user.username}!")
    return redirect(request, "/campgrounds")


@router.get("/login")
def login_form(request: Request):
    return render(request, "login.html", {"page": "login"})


@router.post("/login")
def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        user = authenticate(db, username, password)
    except AuthError as e:
        flash(request, "error", str(e))
        return redirect(request, "/login")
    login_user(request, user)
    flash(request, "success", "Welcome to YelpCamp !")
    return redirect(request, "/campgrounds")


@router.get("/logout")
def logout(request: Request, user: User = Depends(require_login)):
    logout_user(request)
    flash(request, "success", "Successfully logged out.")
    return redirect(request, "/campgrounds")
