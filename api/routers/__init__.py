"""
Router package for the Agent API.

This package contains all API routers organized by domain:
- health: Health check and metrics endpoints
- agent: Internal agent function dispatch endpoints
"""

from api.routers.health import router as health_router
from api.routers.agent import router as agent_router

__all__ = [
    "health_router",
    "agent_router",
]
