"""Liveness message used by the root endpoint."""


def get_health_message() -> str:
    """Return a static liveness message."""
    return "BACC Backend is running!"
