from datetime import date

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from utils.availability import compute_blocked_dates
from utils.dynamodb import BookingRepository, PropertyRepository, get_table
from utils.middleware import create_response, error_response, get_path_uuid, handle_errors

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """List the dates a property cannot be booked for.

    Dates before today are not listed; the client disables those on its own.
    """
    property_id = get_path_uuid(event)
    if property_id is None:
        return error_response(
            400, "Invalid property ID", "Property ID must be a valid UUID"
        )

    table = get_table()

    listing = PropertyRepository(table).get(property_id)
    if not listing:
        return error_response(404, "Not found", "Property not found")

    bookings = BookingRepository(table).get_by_property(property_id)
    blocked = compute_blocked_dates(bookings)

    return create_response(
        200,
        {
            "property_id": str(property_id),
            "today": date.today().isoformat(),
            "blocked_dates": sorted(d.isoformat() for d in blocked),
        },
    )
