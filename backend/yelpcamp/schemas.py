from pydantic import BaseModel, Field
from datetime import datetime

class AuthorOut(BaseModel):
    id: int | None
    username: str | None
    class Config:
        from_attributes = True

class CampgroundOut(BaseModel):
    id: int
    name: str
    price: str | None = None
    location: str | None = None
    description: str | None = None
    image: str | None = None
    image_id: str | None = None
    author: AuthorOut
    # raw documents call the comment id list "comments"
    comments: list[int] = Field(default_factory=list, validation_alias="comment_ids")
    created_at: datetime | None = None
    class Config:
        from_attributes = True

def campgrounds_json(rows) -> list[dict]:
    return [CampgroundOut.model_validate(r).model_dump(mode="json") for r in rows]
