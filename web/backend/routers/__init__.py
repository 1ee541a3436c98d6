"""API route handlers."""

from .skills import router as skills_router
from .bubbles import router as bubbles_router
from .study_requests import router as study_requests_router
from .matches import router as matches_router
from .notifications import router as notifications_router
from .profile import router as profile_router
