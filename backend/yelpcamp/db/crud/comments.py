from typing import Optional

from sqlalchemy.orm import Session

from yelpcamp.db.crud import parse_id
from yelpcamp.db.models import Comment, User

def get(db: Session, comment_id) -> Optional[Comment]:
    pk = parse_id(comment_id)
    return db.get(Comment, pk) if pk is not None else None

def create(db: Session, text: str) -> Comment:
    comment = Comment(text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment

def stamp_author(db: Session, comment: Comment, user: User) -> None:
    comment.author_id = user.id
    comment.author_username = user.username
    db.commit()

def update(db: Session, comment: Comment, text: str) -> Comment:
    comment.text = text
    db.commit()
    return comment

def delete(db: Session, comment: Comment) -> None:
    db.delete(comment)
    db.commit()
