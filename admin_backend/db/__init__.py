from .session import DatabaseManager, db_manager, get_session

__all__ = ["DatabaseManager", "db_manager", "get_session"]
