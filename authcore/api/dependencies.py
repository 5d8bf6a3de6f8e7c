"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from concurrent.futures import Executor

from fastapi import Request
from psycopg_pool import ConnectionPool

from authcore.adapters.repository.postgres import PostgresAccountRepository
from authcore.domain.availability import FieldAvailabilityChecker
from authcore.domain.hashing import CredentialHasher
from authcore.domain.login import Authenticator
from authcore.domain.registration import RegistrationCoordinator


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_hasher(request: Request) -> CredentialHasher:
    """Get the shared credential hasher from app state."""
    return request.app.state.hasher


def get_hashing_pool(request: Request) -> Executor:
    """Get the dedicated hashing executor from app state."""
    return request.app.state.hashing_pool


def get_availability_checker(request: Request) -> FieldAvailabilityChecker:
    """Create availability checker with repository."""
    return FieldAvailabilityChecker(get_repository(request))


def get_registration_coordinator(request: Request) -> RegistrationCoordinator:
    """
    Create registration coordinator with injected dependencies.

    Wires together the repository, hasher and hashing pool.
    """
    return RegistrationCoordinator(
        repository=get_repository(request),
        hasher=get_hasher(request),
        hashing_pool=get_hashing_pool(request),
    )


def get_authenticator(request: Request) -> Authenticator:
    """
    Get the authenticator built at startup.

    It is created once because it precomputes a dummy hash.
    """
    return request.app.state.authenticator
