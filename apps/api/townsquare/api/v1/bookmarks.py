from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from townsquare.api.deps import get_current_user
from townsquare.db.session import get_db
from townsquare.models.user import User
from townsquare.schemas.post import PostListResponse
from townsquare.services.feed_service import FeedService

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("", response_model=PostListResponse)
def list_bookmarks(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FeedService(db).list_bookmarks(user=current_user, page=page)
