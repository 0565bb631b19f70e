from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from yelpcamp.api.deps import get_db
from yelpcamp.db.crud import campgrounds as campground_crud
from yelpcamp.db.crud import users
from yelpcamp.errors import FlashRedirect
from yelpcamp.templating import render

router = APIRouter()

@router.get("/")
def landing(request: Request):
    return render(request, "landing.html")

@router.get("/users/{user_id}")
def profile(user_id: str, request: Request, db: Session = Depends(get_db)):
    user = users.get(db, user_id)
    if user is None:
        raise FlashRedirect("/", "Something went wrong...")
    campgrounds = campground_crud.list_by_author(db, user.id)
    return render(request, "users/show.html", {"user": user, "campgrounds": campgrounds})
