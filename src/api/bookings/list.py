from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from models.common import UserIdentity
from utils.dynamodb import BookingRepository, get_table
from utils.middleware import create_response, handle_errors, require_user

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
@require_user()
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """List the signed-in user's trips, latest check-in first."""
    user: UserIdentity = event["user"]

    bookings = BookingRepository(get_table()).get_by_user(user.user_id)
    logger.debug(f"Found {len(bookings)} bookings for user {user.user_id}")

    return create_response(
        200,
        {
            "bookings": [booking.model_dump(mode="json") for booking in bookings],
            "count": len(bookings),
        },
    )
