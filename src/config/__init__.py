from .settings import settings
from .database import async_session_manager, engine
from .table_names import DatabaseRoles, TableNames

__all__ = [
    "settings",
    "async_session_manager",
    "engine",
    "DatabaseRoles",
    "TableNames",
]
