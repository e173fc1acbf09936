"""Network clients for the feed, push broadcast and SMS gateway."""

from .feed import FeedClient
from .ntfy import NtfyBroadcastClient
from .sms_gateway import SmsGatewayClient

__all__ = ["FeedClient", "NtfyBroadcastClient", "SmsGatewayClient"]
