"""
API Router
Combines all endpoint routers
"""
from fastapi import APIRouter
from app.api.v1.endpoints import (
    chat,
    health,
    leads,
    reminders,
)

api_router = APIRouter()

api_router.include_router(chat.router)
api_router.include_router(health.router)
api_router.include_router(leads.router)
api_router.include_router(reminders.router)
