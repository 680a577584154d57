"""FastAPI dependency injection."""

from datetime import date


def get_today() -> date:
    """Reference date for payoff calculations when no origination date is sent."""
    return date.today()
