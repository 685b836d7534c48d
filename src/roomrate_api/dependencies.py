"""FastAPI dependency injection providers for the booking services.

Services are built lazily and cached with @lru_cache so every request
shares one instance.

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── PaymentService
        └── BookingService
                ├── PricingService (policy from settings)
                ├── AvailabilityService
                └── CancellationPolicyService (cutoff from settings)

Testing:
    Use reset_services() to clear cached instances between tests, or
    override the providers with app.dependency_overrides.
"""

import hmac
from functools import lru_cache

from fastapi import Depends, Header

from roomrate.config import Settings, get_settings
from roomrate.models import AuthRequiredError, GuestSession, PricingPolicy, UnauthorizedError
from roomrate.services.availability import AvailabilityService
from roomrate.services.booking import BookingService
from roomrate.services.cancellation import CancellationPolicyService
from roomrate.services.dynamodb import get_dynamodb_service, reset_dynamodb_service
from roomrate.services.payment_service import PaymentService
from roomrate.services.pricing import PricingService, load_pricing_policy
from roomrate.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def get_pricing_service() -> PricingService:
    """Get cached PricingService.

    Uses the policy file from settings when one is configured, otherwise
    the default table with the configured tax rate and service fee.
    """
    settings = get_settings()
    if settings.pricing_policy_file:
        policy = load_pricing_policy(settings.pricing_policy_file)
    else:
        policy = PricingPolicy.default(
            tax_rate=settings.tax_rate,
            service_fee=settings.service_fee,
        )
    return PricingService(policy=policy)


@lru_cache
def get_availability_service() -> AvailabilityService:
    return AvailabilityService()


@lru_cache
def get_cancellation_service() -> CancellationPolicyService:
    return CancellationPolicyService(cutoff_hours=get_settings().cancellation_cutoff_hours)


@lru_cache
def get_payment_service() -> PaymentService:
    return PaymentService(db=get_dynamodb_service())


@lru_cache
def get_booking_service() -> BookingService:
    """Get cached BookingService configured with all required dependencies."""
    return BookingService(
        db=get_dynamodb_service(),
        pricing=get_pricing_service(),
        availability=get_availability_service(),
        cancellation=get_cancellation_service(),
        payments=get_payment_service(),
    )


def get_guest_session(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
) -> GuestSession:
    """Build the caller's GuestSession from gateway identity headers.

    The gateway authenticates the caller and forwards the subject in
    x-user-id.

    Raises:
        AuthRequiredError: No identity header on the request
    """
    if not x_user_id:
        raise AuthRequiredError()
    return GuestSession(user_id=x_user_id, email=x_user_email, full_name=x_user_name)


def verify_payment_webhook_secret(
    x_payment_webhook_secret: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Accept only calls carrying the payment processor's shared secret.

    Raises:
        AuthRequiredError: Header missing
        UnauthorizedError: Header does not match, or no secret is configured
    """
    if not x_payment_webhook_secret:
        raise AuthRequiredError(details={"header": "x-payment-webhook-secret"})

    expected = settings.payment_webhook_secret
    if not expected:
        logger.warning("Payment confirmation refused: PAYMENT_WEBHOOK_SECRET is not configured")
        raise UnauthorizedError()

    if not hmac.compare_digest(x_payment_webhook_secret.encode(), expected.encode()):
        logger.warning("Payment confirmation refused: webhook secret mismatch")
        raise UnauthorizedError()


def reset_services() -> None:
    """Clear all cached service instances and the DynamoDB singleton."""
    get_pricing_service.cache_clear()
    get_availability_service.cache_clear()
    get_cancellation_service.cache_clear()
    get_payment_service.cache_clear()
    get_booking_service.cache_clear()
    reset_dynamodb_service()
