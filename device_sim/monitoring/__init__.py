from .log_feed import LogFeed, make_log_entry
from .session import MonitoringSession
from .factory import create_dispatcher, create_session

__all__ = [
    "LogFeed",
    "make_log_entry",
    "MonitoringSession",
    "create_dispatcher",
    "create_session",
]
