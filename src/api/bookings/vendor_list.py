from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from models.common import UserIdentity
from utils.dynamodb import BookingRepository, PropertyRepository, get_table
from utils.middleware import create_response, handle_errors, require_user

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
@require_user()
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """List bookings across every property the signed-in vendor owns."""
    user: UserIdentity = event["user"]

    table = get_table()
    property_repo = PropertyRepository(table)
    booking_repo = BookingRepository(table)

    listings = property_repo.get_by_owner(user.user_id)

    bookings = []
    for listing in listings:
        bookings.extend(booking_repo.get_by_property(listing.id))
    bookings.sort(key=lambda booking: booking.check_in_date, reverse=True)

    logger.debug(
        f"Found {len(bookings)} bookings across {len(listings)} properties "
        f"of vendor {user.user_id}"
    )

    return create_response(
        200,
        {
            "bookings": [booking.model_dump(mode="json") for booking in bookings],
            "count": len(bookings),
        },
    )
