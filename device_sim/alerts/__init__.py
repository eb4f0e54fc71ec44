"""Mensajes de estado y notificaciones al técnico."""

from .dispatcher import NotificationDispatcher
from .messages import describe_issue, status_message
from .notification_service import NotifierConfig, TechnicianNotifier

__all__ = [
    "NotificationDispatcher",
    "describe_issue",
    "status_message",
    "NotifierConfig",
    "TechnicianNotifier",
]
