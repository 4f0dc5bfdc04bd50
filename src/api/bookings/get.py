from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from models.common import UserIdentity
from utils.dynamodb import BookingRepository, get_table
from utils.middleware import (
    create_response,
    error_response,
    get_path_uuid,
    handle_errors,
    require_user,
)

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
@require_user()
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Get booking details by ID."""
    user: UserIdentity = event["user"]

    booking_id = get_path_uuid(event)
    if booking_id is None:
        return error_response(
            400, "Invalid booking ID", "Booking ID must be a valid UUID"
        )

    booking = BookingRepository(get_table()).get(booking_id)
    if not booking:
        return error_response(404, "Not found", "Booking not found")

    if booking.user_id != user.user_id:
        logger.warning(f"User {user.user_id} requested booking {booking_id} of another user")
        return error_response(403, "Forbidden", "This booking belongs to another user")

    return create_response(200, booking)
