from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from models.common import QuoteRequest
from utils.dynamodb import PropertyRepository, get_table
from utils.middleware import (
    create_response,
    error_response,
    get_path_uuid,
    handle_errors,
    parse_body,
)
from utils.pricing import compute_price, select_extras

logger = Logger()
tracer = Tracer()


@tracer.capture_lambda_handler
@handle_errors
@parse_body(QuoteRequest)
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Price a prospective stay without booking it."""
    quote_request: QuoteRequest = event["parsed_body"]

    property_id = get_path_uuid(event)
    if property_id is None:
        return error_response(
            400, "Invalid property ID", "Property ID must be a valid UUID"
        )

    listing = PropertyRepository(get_table()).get(property_id)
    if not listing:
        return error_response(404, "Not found", "Property not found")

    listing.validate_guest_count(quote_request.guests)
    extras = select_extras(listing.pricing, quote_request.extras)

    breakdown = compute_price(
        quote_request.date_range, listing.pricing, extras, quote_request.guests
    )
    logger.debug(f"Quoted {breakdown.nights} nights at {breakdown.total} for {property_id}")

    return create_response(200, breakdown)
