"""Shared API dependencies.

Each request gets its own session, wrapped in a ``CheckinStore`` that is
passed explicitly into the services it uses.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from groupshare.core.sanitization import sanitize_group_code
from groupshare.db import get_db, get_db_context
from groupshare.db.store import CheckinStore
from groupshare.services import (
    AccommodationService,
    CheckinLedger,
    GroupRegistry,
    PlaceDirectory,
    PresenceAggregator,
    build_place_directory,
)


def get_store(db: Session = Depends(get_db)) -> CheckinStore:
    return CheckinStore(db)


def get_place_directory() -> PlaceDirectory:
    return build_place_directory()


def get_registry(store: CheckinStore = Depends(get_store)) -> GroupRegistry:
    return GroupRegistry(store)


def get_ledger(
    store: CheckinStore = Depends(get_store),
    places: PlaceDirectory = Depends(get_place_directory),
) -> CheckinLedger:
    return CheckinLedger(store, places)


def get_accommodation_service(store: CheckinStore = Depends(get_store)) -> AccommodationService:
    return AccommodationService(store)


def get_presence(store: CheckinStore = Depends(get_store)) -> PresenceAggregator:
    return PresenceAggregator(store)


def valid_group_code(code: str) -> str:
    """Path parameter dependency: a sanitized 6-digit join code."""
    return sanitize_group_code(code)


__all__ = [
    "get_db",
    "get_db_context",
    "get_store",
    "get_place_directory",
    "get_registry",
    "get_ledger",
    "get_accommodation_service",
    "get_presence",
    "valid_group_code",
]
