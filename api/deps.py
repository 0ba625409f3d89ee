"""
FastAPI Dependency Providers for the Agent API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings and the ticket store are cached per-process (lru_cache)
- The async Supabase client and the FunctionRegistry are async singletons
  guarded by asyncio.Lock (lru_cache doesn't work with async functions)
- Repositories are instantiated per-request with the shared Supabase client.
  Without Supabase credentials they still resolve and raise CollaboratorError
  when used, so tools that never touch storage keep working.
"""

import asyncio
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from supabase import AsyncClient, create_async_client

from application.ports.profile_repository import ProfileRepository
from application.ports.user_settings_repository import UserSettingsRepository
from application.ports.workout_repository import WorkoutRepository
from backend.services.confirmation_store import ConfirmationTicketStore
from backend.services.function_registry import FunctionRegistry
from backend.services.registry_factory import build_function_registry
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.db.async_profile_repository import AsyncSupabaseProfileRepository
from infrastructure.db.async_user_settings_repository import (
    AsyncSupabaseUserSettingsRepository,
)
from infrastructure.db.async_workout_repository import AsyncSupabaseWorkoutRepository


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Async Supabase Client Provider
# =============================================================================

_async_supabase_client: Optional[AsyncClient] = None
_async_supabase_lock = asyncio.Lock()


async def get_supabase_async_client() -> Optional[AsyncClient]:
    """
    Get async Supabase client instance (singleton).

    Returns None if credentials are not configured.
    """
    global _async_supabase_client

    if _async_supabase_client is not None:
        return _async_supabase_client

    async with _async_supabase_lock:
        # Double-check pattern: another coroutine may have initialized while we waited
        if _async_supabase_client is not None:
            return _async_supabase_client

        settings = _get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            return None

        _async_supabase_client = await create_async_client(
            settings.supabase_url, settings.supabase_key
        )
        return _async_supabase_client


# =============================================================================
# Repository Providers
# =============================================================================


async def get_workout_repository(
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
) -> WorkoutRepository:
    """Get async workout repository instance."""
    return AsyncSupabaseWorkoutRepository(client)


async def get_profile_repository(
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
) -> ProfileRepository:
    """Get async profile repository instance."""
    return AsyncSupabaseProfileRepository(client)


async def get_user_settings_repository(
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
) -> UserSettingsRepository:
    """Get async user settings repository instance."""
    return AsyncSupabaseUserSettingsRepository(client)


# =============================================================================
# Agent Function Providers
# =============================================================================

_function_registry: Optional[FunctionRegistry] = None
_function_registry_lock = asyncio.Lock()


async def get_function_registry(
    workouts: WorkoutRepository = Depends(get_workout_repository),
    profiles: ProfileRepository = Depends(get_profile_repository),
    user_settings: UserSettingsRepository = Depends(get_user_settings_repository),
) -> FunctionRegistry:
    """
    Get the sealed FunctionRegistry (built once per process).

    The repositories share the process-wide Supabase client, so the
    ones resolved for the first request are safe to keep.
    """
    global _function_registry

    if _function_registry is not None:
        return _function_registry

    async with _function_registry_lock:
        if _function_registry is None:
            _function_registry = build_function_registry(workouts, profiles, user_settings)
        return _function_registry


@lru_cache
def get_confirmation_store() -> Optional[ConfirmationTicketStore]:
    """
    Get the confirmation ticket store (cached).

    Returns None when ticket enforcement is disabled, in which case
    confirmations trust the echoed pending action.
    """
    settings = _get_settings()
    if not settings.confirmation_tickets_enabled:
        return None
    return ConfirmationTicketStore(ttl_seconds=settings.confirmation_ticket_ttl_seconds)


# =============================================================================
# Caller Identity
# =============================================================================


def get_caller_id(
    x_user_id: str = Header(..., alias="X-User-Id", min_length=1),
) -> str:
    """User the orchestrator is acting for. The orchestrator authenticates users."""
    return x_user_id
