import logging

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from yelpcamp import services
from yelpcamp.api.deps import comment_owner, get_db, require_login
from yelpcamp.db.crud import campgrounds as campground_crud
from yelpcamp.db.crud import comments as comment_crud
from yelpcamp.db.models import Comment, User
from yelpcamp.errors import FlashRedirect
from yelpcamp.flash import flash, redirect
from yelpcamp.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campgrounds/{campground_id}/comments", tags=["comments"])


@router.get("/new")
def new(campground_id: str, request: Request, user: User = Depends(require_login), db: Session = Depends(get_db)):
    campground = campground_crud.get(db, campground_id)
    if campground is None:
        return redirect(request, "/campgrounds")
    return render(request, "comments/new.html", {"campground": campground})


@router.post("")
def create(
    campground_id: str,
    request: Request,
    text: str = Form(""),
    user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    campground = campground_crud.get(db, campground_id)
    if campground is None:
        logger.info("comment on missing campground %s", campground_id)
        return redirect(request, "/campgrounds")
    try:
        services.add_comment(db, campground, user, text)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("comment create failed: %s", e)
        return redirect(request, "/campgrounds")
    flash(request, "success", "Successfully added comment")
    return redirect(request, f"/campgrounds/{campground_id}")


@router.get("/{comment_id}/edit")
def edit(
    campground_id: str,
    request: Request,
    comment: Comment = Depends(comment_owner),
    db: Session = Depends(get_db),
):
    if campground_crud.get(db, campground_id) is None:
        raise FlashRedirect("back", "Campground not found.")
    return render(request, "comments/edit.html", {"campground_id": campground_id, "comment": comment})


@router.put("/{comment_id}")
def update(
    campground_id: str,
    request: Request,
    text: str = Form(""),
    comment: Comment = Depends(comment_owner),
    db: Session = Depends(get_db),
):
    try:
        comment_crud.update(db, comment, text)
    except SQLAlchemyError:
        db.rollback()
        return redirect(request, "back")
    flash(request, "success", "Post successfully updated.")
    return redirect(request, f"/campgrounds/{campground_id}")


@router.delete("/{comment_id}")
def destroy(
    campground_id: str,
    request: Request,
    comment: Comment = Depends(comment_owner),
    db: Session = Depends(get_db),
):
    # the id stays in the campground's comment list
    try:
        comment_crud.delete(db, comment)
    except SQLAlchemyError:
        db.rollback()
        return redirect(request, "back")
    flash(request, "success", "Comment deleted.")
    return redirect(request, f"/campgrounds/{campground_id}")
