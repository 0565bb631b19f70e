from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from yelpcamp.db.crud import parse_id
from yelpcamp.db.models import Campground, Comment

LIKE_ESCAPE = "\\"

def escape_like(text: str) -> str:
    """Make `text` match literally inside a LIKE pattern."""
    for ch in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(ch, LIKE_ESCAPE + ch)
    return text

def list_all(db: Session) -> list[Campground]:
    return list(db.scalars(select(Campground).order_by(Campground.id)))

def search_by_name(db: Session, term: str) -> list[Campground]:
    """Case-insensitive substring match on the name."""
    pattern = f"%{escape_like(term)}%"
    stmt = (
        select(Campground)
        .where(Campground.name.ilike(pattern, escape=LIKE_ESCAPE))
        .order_by(Campground.id)
    )
    return list(db.scalars(stmt))

def list_by_author(db: Session, author_id: int) -> list[Campground]:
    stmt = select(Campground).where(Campground.author_id == author_id).order_by(Campground.id)
    return list(db.scalars(stmt))

def get(db: Session, campground_id) -> Optional[Campground]:
    pk = parse_id(campground_id)
    return db.get(Campground, pk) if pk is not None else None

def get_comments(db: Session, campground: Campground) -> list[Comment]:
    """Comments in list order; ids whose row is gone are skipped."""
    ids = list(campground.comment_ids or [])
    if not ids:
        return []
    found = {c.id: c for c in db.scalars(select(Comment).where(Comment.id.in_(ids)))}
    return [found[i] for i in ids if i in found]

def create(db: Session, **fields) -> Campground:
    campground = Campground(**fields)
    db.add(campground)
    db.commit()
    db.refresh(campground)
    return campground

def update(db: Session, campground: Campground, **fields) -> Campground:
    for key, value in fields.items():
        setattr(campground, key, value)
    db.commit()
    return campground

def append_comment(db: Session, campground: Campground, comment: Comment) -> None:
    campground.comment_ids.append(comment.id)
    db.commit()

def delete(db: Session, campground: Campground) -> None:
    db.delete(campground)
    db.commit()
