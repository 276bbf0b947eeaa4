"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from eventspot.api.routes import auth, users, catalog, events, bookings

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(catalog.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
