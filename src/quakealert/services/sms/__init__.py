"""SMS alert subscription."""

from .service import SmsGateway, SmsSubscriptionService, normalize_phone_number

__all__ = ["SmsGateway", "SmsSubscriptionService", "normalize_phone_number"]
