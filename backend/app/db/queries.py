"""Visibility-safe query helpers."""

from sqlalchemy import Select, select

from backend.app.db.models import TravelPlan


def select_public_plans(destination: str | None = None) -> Select[tuple[TravelPlan]]:
    """Select travel plans visible to the public listing.

    Args:
        destination: Optional case-insensitive substring filter

    Returns:
        Select filtered to public, non-deleted plans
    """
    query = select(TravelPlan).where(
        TravelPlan.is_public.is_(True), TravelPlan.deleted_at.is_(None)
    )

    if destination:
        query = query.where(TravelPlan.destination.ilike(f"%{destination}%"))

    return query
