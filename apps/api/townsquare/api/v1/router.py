from fastapi import APIRouter

from townsquare.api.v1.auth import router as auth_router
from townsquare.api.v1.bookmarks import router as bookmarks_router
from townsquare.api.v1.communities import router as communities_router
from townsquare.api.v1.posts import router as posts_router
from townsquare.api.v1.users import router as users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(posts_router)
api_router.include_router(bookmarks_router)
api_router.include_router(communities_router)
