from datetime import date, datetime, timezone
from uuid import uuid4

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from models.common import Booking, CreateBookingRequest, PropertyStatus, UserIdentity
from utils.availability import compute_blocked_dates, find_unavailable_dates
from utils.dynamodb import BookingRepository, PropertyRepository, get_table
from utils.email import EmailService
from utils.middleware import (
    create_response,
    error_response,
    get_path_uuid,
    handle_errors,
    parse_body,
    require_user,
)
from utils.pricing import compute_price, select_extras

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
@require_user(verified_email=True)
@parse_body(CreateBookingRequest)
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Create a new booking."""
    booking_request: CreateBookingRequest = event["parsed_body"]
    user: UserIdentity = event["user"]

    property_id = get_path_uuid(event)
    if property_id is None:
        return error_response(
            400, "Invalid property ID", "Property ID must be a valid UUID"
        )

    table = get_table()
    property_repo = PropertyRepository(table)
    booking_repo = BookingRepository(table)

    listing = property_repo.get(property_id)
    if not listing:
        return error_response(404, "Not found", "Property not found")

    if listing.status != PropertyStatus.APPROVED:
        return error_response(
            400, "Not bookable", "This property is not accepting bookings"
        )

    listing.validate_guest_count(booking_request.guests)
    extras = select_extras(listing.pricing, booking_request.extras)

    # Check the requested nights against existing bookings
    blocked = compute_blocked_dates(booking_repo.get_by_property(property_id))
    unavailable = find_unavailable_dates(
        booking_request.check_in_date,
        booking_request.check_out_date,
        blocked,
        date.today(),
    )
    if unavailable:
        logger.info(
            f"Rejected booking for property {property_id}: "
            f"{len(unavailable)} unavailable nights"
        )
        return create_response(
            409,
            {
                "error": "Date conflict",
                "message": "Selected dates are not available",
                "unavailable_dates": [d.isoformat() for d in unavailable],
            },
        )

    price = compute_price(
        booking_request.date_range, listing.pricing, extras, booking_request.guests
    )

    now = datetime.now(timezone.utc)
    booking = Booking(
        id=uuid4(),
        property_id=property_id,
        user_id=user.user_id,
        property_name=listing.name,
        property_location=listing.location,
        price=price,
        total_price=price.total,
        created_at=now,
        updated_at=now,
        **booking_request.model_dump(),
    )
    booking_repo.create(booking)

    logger.info(f"Created booking {booking.id} with total price {booking.total_price}")

    try:
        EmailService().send_booking_confirmation(booking, user.email)
    except Exception as e:
        # The booking stands even if the email could not be sent
        logger.error(f"Failed to send confirmation email: {str(e)}")

    return create_response(201, booking)
