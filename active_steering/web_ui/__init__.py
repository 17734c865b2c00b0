"""active_steering.web_ui: Flask status surface."""

from active_steering.web_ui.app import create_app

__all__ = ["create_app"]
