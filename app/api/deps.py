from fastapi import Request

from app.config import Settings


def get_settings(request: Request) -> Settings:
    """
    Settings built at startup and stored on the application.
    """
    return request.app.state.settings
