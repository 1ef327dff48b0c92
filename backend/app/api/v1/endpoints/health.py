"""
Health Check Endpoint
Provides health status for container health checks and monitoring
"""
from fastapi import APIRouter, status
from datetime import datetime
from typing import Dict

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Dict with status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "service": "rm-lead-copilot"
    }
