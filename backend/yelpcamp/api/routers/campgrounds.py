import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from yelpcamp import services
from yelpcamp.api.deps import (
    campground_owner,
    get_asset_host,
    get_db,
    is_xhr,
    require_login,
)
from yelpcamp.assets import AssetHost
from yelpcamp.db.crud import campgrounds as campground_crud
from yelpcamp.db.models import Campground, User
from yelpcamp.errors import AssetHostError, FlashRedirect, ImageValidationError
from yelpcamp.flash import flash, redirect
from yelpcamp.schemas import campgrounds_json
from yelpcamp.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campgrounds", tags=["campgrounds"])


async def _read_image(image: Optional[UploadFile]):
    if image is None or not image.filename:
        return None
    return image.filename, await image.read()


@router.get("")
def index(request: Request, search: Optional[str] = None, db: Session = Depends(get_db)):
    xhr = is_xhr(request)
    if search and xhr:
        return JSONResponse(campgrounds_json(campground_crud.search_by_name(db, search)))
    campgrounds = campground_crud.list_all(db)
    if xhr:
        return JSONResponse(campgrounds_json(campgrounds))
    return render(request, "campgrounds/index.html", {"campgrounds": campgrounds, "page": "campgrounds"})


@router.post("")
async def create(
    request: Request,
    name: str = Form(""),
    price: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(require_login),
    host: AssetHost = Depends(get_asset_host),
    db: Session = Depends(get_db),
):
    upload = await _read_image(image)
    if upload is None:
        raise ImageValidationError()
    fields = {"name": name, "price": price, "location": location, "description": description}
    try:
        campground = services.create_campground(db, host, fields, upload, user)
    except (AssetHostError, SQLAlchemyError) as e:
        db.rollback()
        logger.warning("campground create failed: %s", e)
        flash(request, "error", str(e))
        return redirect(request, "back")
    return redirect(request, f"/campgrounds/{campground.id}")


@router.get("/new")
def new(request: Request, user: User = Depends(require_login)):
    return render(request, "campgrounds/new.html")


@router.get("/{campground_id}")
def show(campground_id: str, request: Request, db: Session = Depends(get_db)):
    campground = campground_crud.get(db, campground_id)
    if campground is None:
        raise FlashRedirect("back", "That campground does not exist.")
    comments = campground_crud.get_comments(db, campground)
    return render(request, "campgrounds/show.html", {"campground": campground, "comments": comments})


@router.get("/{campground_id}/edit")
def edit(request: Request, campground: Campground = Depends(campground_owner)):
    return render(request, "campgrounds/edit.html", {"campground": campground})


# Not behind campground_owner: any caller reaching this route can update.
@router.put("/{campground_id}")
async def update(
    campground_id: str,
    request: Request,
    image: Optional[UploadFile] = File(None),
    host: AssetHost = Depends(get_asset_host),
    db: Session = Depends(get_db),
):
    campground = campground_crud.get(db, campground_id)
    if campground is None:
        raise FlashRedirect("back", "That campground does not exist.")
    upload = await _read_image(image)
    # only submitted fields are written; an empty string clears the field
    form = await request.form()
    fields = {k: form[k] for k in services.CAMPGROUND_FIELDS if isinstance(form.get(k), str)}
    try:
        services.update_campground(db, host, campground, fields, upload)
    except (AssetHostError, SQLAlchemyError) as e:
        db.rollback()
        logger.warning("campground %s update failed: %s", campground_id, e)
        flash(request, "error", str(e))
        return redirect(request, "back")
    flash(request, "success", "Successfully Updated!")
    return redirect(request, f"/campgrounds/{campground_id}")


@router.delete("/{campground_id}")
def destroy(
    request: Request,
    campground: Campground = Depends(campground_owner),
    host: AssetHost = Depends(get_asset_host),
    db: Session = Depends(get_db),
):
    try:
        services.delete_campground(db, host, campground)
    except (AssetHostError, SQLAlchemyError) as e:
        db.rollback()
        flash(request, "error", str(e))
        return redirect(request, "back")
    flash(request, "success", "Campground deleted successfully!")
    return redirect(request, "/campgrounds")
