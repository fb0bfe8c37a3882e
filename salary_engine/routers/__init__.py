"""FastAPI routers for the salary engine."""

from .admin import router as admin_router
from .salaries import router as salaries_router

__all__ = [
    "admin_router",
    "salaries_router",
]
