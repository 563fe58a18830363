"""
ASGI entry point.

    uvicorn reconciler.web.asgi:app
"""

from reconciler.config import get_settings
from reconciler.log import configure_logging
from reconciler.web._app import create_app

settings = get_settings()
configure_logging(settings.log_level, json=settings.log_json)

app = create_app(settings)
