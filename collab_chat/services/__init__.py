"""
Services layer for store access and change notification.

This layer handles:
- Resource creation, lookup, update and listing per kind
- Composite chat room resolution
- Watermark polling and simulated activity
"""

from . import user_service
from . import message_service
from . import chat_room_service
from . import notification_service

__all__ = [
    "user_service",
    "message_service",
    "chat_room_service",
    "notification_service"
]
