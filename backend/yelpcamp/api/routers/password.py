"""
Forgot-password flow: mail a one-hour reset link, then accept a new password.
"""
import logging

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session

from yelpcamp.api.deps import get_db, get_mailer
from yelpcamp.auth import login_user
from yelpcamp.core.config import Settings, get_settings
from yelpcamp.core.security import new_reset_token, reset_expiry
from yelpcamp.db.crud import users
from yelpcamp.errors import MailError
from yelpcamp.flash import flash, redirect
from yelpcamp.mail import Mailer, reset_done_body, reset_request_body
from yelpcamp.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["password"])

INVALID_TOKEN = "Password reset token is invalid or has expired."


@router.get("/forgot")
def forgot_form(request: Request):
    return render(request, "forgot.html")


@router.post("/forgot")
def forgot(
    request: Request,
    email: str = Form(""),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    user = users.get_by_email(db, email)
    if user is None:
        return render(request, "forgot.html", {"error": "No account with that email exists."})

    token = new_reset_token()
    users.set_reset_token(db, user, token, reset_expiry(settings.RESET_TOKEN_TTL_SECONDS))

    host = request.headers.get("host", request.url.netloc)
    try:
        mailer.send(user.email, None, reset_request_body(host, token))
    except MailError as e:
        flash(request, "error", str(e))
        return redirect(request, "/forgot")
    flash(request, "success", f"An email has been sent to {user.email} with further instructions.")
    return redirect(request, "/forgot")


@router.get("/reset/{token}")
def reset_form(token: str, request: Request, db: Session = Depends(get_db)):
    if users.get_by_reset_token(db, token) is None:
        flash(request, "error", INVALID_TOKEN)
        return redirect(request, "/forgot")
    return render(request, "reset.html", {"token": token})


@router.post("/reset/{token}")
def reset(
    token: str,
    request: Request,
    password: str = Form(""),
    confirm: str = Form(""),
    mailer: Mailer = Depends(get_mailer),
    db: Session = Depends(get_db),
):
    user = users.get_by_reset_token(db, token)
    if user is None:
        flash(request, "error", INVALID_TOKEN)
        return redirect(request, "back")
    if password != confirm:
        flash(request, "error", "Passwords do not match.")
        return redirect(request, "back")

    users.set_password(db, user, password)
    login_user(request, user)
    try:
        mailer.send(user.email, "Your password has been changed", reset_done_body(user.email))
    except MailError as e:
        # password is already changed at this point
        flash(request, "error", str(e))
        return redirect(request, "/campgrounds")
    flash(request, "success", "Success! Your password has been changed.")
    return redirect(request, "/campgrounds")
