"""
Multi-step write paths that touch the asset host as well as the store.

Each function either finishes or raises; callers turn the exception into a
flash message. Steps already done on the asset host are not rolled back.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from yelpcamp.assets import AssetHost, validate_image_filename
from yelpcamp.db.crud import campgrounds as campground_crud
from yelpcamp.db.crud import comments as comment_crud
from yelpcamp.db.models import Campground, Comment, User

logger = logging.getLogger(__name__)

ImageFile = Tuple[str, bytes]

CAMPGROUND_FIELDS = ("name", "price", "location", "description")

def create_campground(db: Session, host: AssetHost, fields: dict, image: ImageFile, author: User) -> Campground:
    filename, content = image
    validate_image_filename(filename)
    asset = host.upload(filename, content)
    data = {k: v for k, v in fields.items() if k in CAMPGROUND_FIELDS}
    return campground_crud.create(
        db,
        **data,
        image=asset.url,
        image_id=asset.asset_id,
        author_id=author.id,
        author_username=author.username,
    )

def update_campground(
    db: Session,
    host: AssetHost,
    campground: Campground,
    fields: dict,
    image: Optional[ImageFile] = None,
) -> Campground:
    data = {k: v for k, v in fields.items() if k in CAMPGROUND_FIELDS}
    if image is not None:
        filename, content = image
        validate_image_filename(filename)
        if campground.image_id:
            host.destroy(campground.image_id)
        asset = host.upload(filename, content)
        data["image"] = asset.url
        data["image_id"] = asset.asset_id
    return campground_crud.update(db, campground, **data)

def delete_campground(db: Session, host: AssetHost, campground: Campground) -> None:
    # comments stay behind; only the image and the row go
    campground_id = campground.id
    if campground.image_id:
        host.destroy(campground.image_id)
    campground_crud.delete(db, campground)
    logger.info("campground %s deleted", campground_id)

def add_comment(db: Session, campground: Campground, author: User, text: str) -> Comment:
    comment = comment_crud.create(db, text)
    comment_crud.stamp_author(db, comment, author)
    campground_crud.append_comment(db, campground, comment)
    return comment
