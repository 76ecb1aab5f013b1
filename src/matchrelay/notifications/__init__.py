"""Subscription registry, event detection and notification dispatch."""

from matchrelay.notifications.aliases import DEFAULT_ALIASES, AliasTable
from matchrelay.notifications.detector import EventDetector
from matchrelay.notifications.dispatcher import NotificationDispatcher, PushSender
from matchrelay.notifications.registry import SubscriptionRegistry
from matchrelay.notifications.templates import DEFAULT_TEMPLATES, TemplateCatalog

__all__ = [
    "AliasTable",
    "DEFAULT_ALIASES",
    "DEFAULT_TEMPLATES",
    "EventDetector",
    "NotificationDispatcher",
    "PushSender",
    "SubscriptionRegistry",
    "TemplateCatalog",
]
