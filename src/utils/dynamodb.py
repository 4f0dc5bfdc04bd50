from datetime import date
from typing import Any, Dict, Generic, List, TypeVar
from uuid import UUID

import boto3
from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import Table
from pydantic import BaseModel

from models.common import Booking, Property

logger = Logger()

T = TypeVar("T", bound=BaseModel)

TABLE_NAME_PARAMETER = "/homie-stays/dynamodb/table_name"


class DynamoDBRepository(Generic[T]):
    def __init__(self, table: Table):
        self.table = table

    def _to_item(self, model: T) -> Dict[str, Any]:
        # Dates, decimals and UUIDs are stored as strings
        return model.model_dump(mode="json", exclude_none=True)

    def _format_date(self, d: date) -> str:
        return d.isoformat()

    def _query_all(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a query and follow LastEvaluatedKey until every page is read."""
        items = []
        while True:
            response = self.table.query(**params)
            items.extend(response["Items"])
            if "LastEvaluatedKey" not in response:
                return items
            params["ExclusiveStartKey"] = response["LastEvaluatedKey"]


class PropertyRepository(DynamoDBRepository[Property]):
    def create(self, listing: Property) -> None:
        item = {
            "PK": f"PROPERTY#{listing.id}",
            "SK": "METADATA",
            "GSI1PK": f"OWNER#{listing.owner_id}",
            "GSI1SK": f"PROPERTY#{listing.id}",
            "Type": "Property",
            **self._to_item(listing),
        }
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Error creating property {listing.id}: {str(e)}")
            raise

    def get(self, property_id: UUID) -> Property | None:
        try:
            response = self.table.get_item(
                Key={"PK": f"PROPERTY#{property_id}", "SK": "METADATA"}
            )
        except ClientError as e:
            logger.error(f"Error getting property {property_id}: {str(e)}")
            raise
        if "Item" not in response:
            return None
        return Property.model_validate(response["Item"])

    def get_by_owner(self, owner_id: str) -> List[Property]:
        """Get all properties listed by a vendor."""
        params: Dict[str, Any] = {
            "IndexName": "GSI1",
            "KeyConditionExpression": Key("GSI1PK").eq(f"OWNER#{owner_id}"),
            "FilterExpression": Attr("Type").eq("Property"),
        }
        try:
            items = self._query_all(params)
        except ClientError as e:
            logger.error(f"Error listing properties for owner {owner_id}: {str(e)}")
            raise

        return [Property.model_validate(item) for item in items]


class BookingRepository(DynamoDBRepository[Booking]):
    def create(self, booking: Booking) -> None:
        check_in = self._format_date(booking.check_in_date)
        item = {
            "PK": f"BOOKING#{booking.id}",
            "SK": "METADATA",
            "GSI1PK": f"PROPERTY#{booking.property_id}",
            "GSI1SK": f"CHECKIN#{check_in}",
            "GSI2PK": f"USER#{booking.user_id}",
            "GSI2SK": f"CHECKIN#{check_in}",
            "Type": "Booking",
            **self._to_item(booking),
        }
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Error creating booking {booking.id}: {str(e)}")
            raise

    def get(self, booking_id: UUID) -> Booking | None:
        try:
            response = self.table.get_item(
                Key={"PK": f"BOOKING#{booking_id}", "SK": "METADATA"}
            )
        except ClientError as e:
            logger.error(f"Error getting booking {booking_id}: {str(e)}")
            raise
        if "Item" not in response:
            return None
        return Booking.model_validate(response["Item"])

    def get_by_property(self, property_id: UUID) -> List[Booking]:
        """Get all bookings for a property, ordered by check-in date."""
        params: Dict[str, Any] = {
            "IndexName": "GSI1",
            "KeyConditionExpression": Key("GSI1PK").eq(f"PROPERTY#{property_id}"),
            "FilterExpression": Attr("Type").eq("Booking"),
        }
        try:
            items = self._query_all(params)
        except ClientError as e:
            logger.error(f"Error listing bookings for property {property_id}: {str(e)}")
            raise

        return [Booking.model_validate(item) for item in items]

    def get_by_user(self, user_id: str) -> List[Booking]:
        """Get a guest's bookings, latest check-in first."""
        params: Dict[str, Any] = {
            "IndexName": "GSI2",
            "KeyConditionExpression": Key("GSI2PK").eq(f"USER#{user_id}"),
            "ScanIndexForward": False,
        }
        try:
            items = self._query_all(params)
        except ClientError as e:
            logger.error(f"Error listing bookings for user {user_id}: {str(e)}")
            raise

        return [Booking.model_validate(item) for item in items]


def get_table() -> Table:
    """Get DynamoDB table instance."""
    dynamodb = boto3.resource("dynamodb")
    table_name = boto3.client("ssm").get_parameter(Name=TABLE_NAME_PARAMETER)[
        "Parameter"
    ]["Value"]
    return dynamodb.Table(table_name)
