import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from townsquare.core.config import settings
from townsquare.core.security import hash_password
from townsquare.db import base as _db_models  # noqa: F401
from townsquare.models.community import Community, CommunityMembership
from townsquare.models.post import Post
from townsquare.models.post_comment import PostComment
from townsquare.models.post_like import PostLike
from townsquare.models.user_follow import UserFollow
from townsquare.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "handle": "admin",
        "email": "admin@example.com",
        "username": "Admin",
        "bio": "Administrator account",
        "profile_image": "https://i.pravatar.cc/150?u=admin",
    },
    {
        "handle": "janesmith",
        "email": "user1@example.com",
        "username": "Jane Smith",
        "bio": "Passionate about technology and design",
        "profile_image": "https://i.pravatar.cc/150?u=jane",
    },
    {
        "handle": "johndoe",
        "email": "user2@example.com",
        "username": "John Doe",
        "bio": "Software developer and coffee enthusiast",
        "profile_image": "https://i.pravatar.cc/150?u=john",
    },
]

DEMO_COMMUNITIES = [
    {
        "name": "Tech Enthusiasts",
        "description": "A community for discussing the latest in technology",
        "image": "https://picsum.photos/seed/tech/300/300",
    },
    {
        "name": "Travel Adventures",
        "description": "Share your travel experiences and tips",
        "image": "https://picsum.photos/seed/travel/300/300",
    },
]


class BootstrapService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.user_repo = UserRepository(db)

    def seed_demo_data(self) -> bool:
        """Create demo users, communities, posts and interactions.

        Returns False without touching anything when the demo accounts exist.
        """
        if self.user_repo.get_by_email(DEMO_USERS[0]["email"]):
            logger.info("demo data already present, skip seeding")
            return False

        password_hash = hash_password(settings.demo_password)
        admin, jane, john = [
            self.user_repo.create(password_hash=password_hash, **fields) for fields in DEMO_USERS
        ]
        tech, travel = [self._ensure_community(**fields) for fields in DEMO_COMMUNITIES]

        self.db.add_all(
            [
                CommunityMembership(user_id=jane.id, community_id=tech.id, role="admin"),
                CommunityMembership(user_id=john.id, community_id=tech.id, role="member"),
                CommunityMembership(user_id=john.id, community_id=travel.id, role="admin"),
            ]
        )

        launch = Post(
            author_id=jane.id,
            community_id=tech.id,
            text="Just launched our new product! Check it out and let me know what you think.",
            images_json=[],
        )
        sunset = Post(
            author_id=john.id,
            community_id=travel.id,
            text="Beautiful sunset from my latest trip to Bali. The colors were absolutely incredible!",
            images_json=["https://picsum.photos/seed/bali/800/600"],
        )
        languages = Post(
            author_id=john.id,
            community_id=tech.id,
            text="What programming languages are you all learning this year? I'm diving deeper into Rust.",
            images_json=[],
        )
        self.db.add_all([launch, sunset, languages])
        self.db.flush()

        self.db.add_all(
            [
                UserFollow(follower_id=jane.id, following_id=john.id),
                UserFollow(follower_id=john.id, following_id=jane.id),
                UserFollow(follower_id=admin.id, following_id=jane.id),
                PostLike(post_id=launch.id, user_id=john.id),
                PostLike(post_id=sunset.id, user_id=jane.id),
                PostComment(post_id=launch.id, author_id=john.id, text="This looks amazing! Can't wait to try it out."),
                PostComment(post_id=sunset.id, author_id=jane.id, text="Wow, what a stunning view! Which beach is this?"),
            ]
        )
        self.db.commit()
        logger.info("seeded demo data", extra={"users": len(DEMO_USERS), "communities": len(DEMO_COMMUNITIES)})
        return True

    def _ensure_community(self, *, name: str, description: str, image: str) -> Community:
        community = self.db.scalar(select(Community).where(Community.name == name))
        if community:
            return community
        community = Community(name=name, description=description, image=image)
        self.db.add(community)
        self.db.flush()
        return community
