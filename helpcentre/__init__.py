from .app import create_app
from .store import ContentStore

__all__ = ["ContentStore", "create_app"]
