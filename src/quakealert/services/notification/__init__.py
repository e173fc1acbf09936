"""Transient user notifications."""

from .presenter import NotificationListener, NotificationPresenter

__all__ = ["NotificationListener", "NotificationPresenter"]
