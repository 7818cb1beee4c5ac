from townsquare.models.base import Base
from townsquare.models.community import Community, CommunityMembership
from townsquare.models.post import Post
from townsquare.models.post_bookmark import PostBookmark
from townsquare.models.post_comment import PostComment
from townsquare.models.post_like import PostLike
from townsquare.models.user import User
from townsquare.models.user_follow import UserFollow
from townsquare.models.user_session import UserSession

__all__ = [
    "Base",
    "User",
    "UserSession",
    "Community",
    "CommunityMembership",
    "Post",
    "PostComment",
    "PostLike",
    "PostBookmark",
    "UserFollow",
]
