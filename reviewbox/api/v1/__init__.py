"""
API v1 Router
"""

from fastapi import APIRouter

from reviewbox.api.v1 import (
    auth,
    categories,
    invitations,
    members,
    review_groups,
    reviews,
    subjects,
    uploads,
    users,
)

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(categories.router)
router.include_router(review_groups.router)
router.include_router(members.router)
router.include_router(subjects.router)
router.include_router(reviews.router)
router.include_router(invitations.router)
router.include_router(uploads.router)

__all__ = ["router"]
