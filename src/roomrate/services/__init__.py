"""Backend services for the roomrate booking engine."""

from .availability import AvailabilityService, conflicting_reservations, ranges_overlap
from .booking import BookingService, display_status
from .cancellation import CancellationPolicyService
from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .payment_service import PaymentService
from .pricing import PricingService, calculate_price, load_pricing_policy

__all__ = [
    "AvailabilityService",
    "BookingService",
    "CancellationPolicyService",
    "DynamoDBService",
    "PaymentService",
    "PricingService",
    "calculate_price",
    "conflicting_reservations",
    "display_status",
    "get_dynamodb_service",
    "load_pricing_policy",
    "ranges_overlap",
    "reset_dynamodb_service",
]
