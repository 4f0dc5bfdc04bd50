import json
import os
from collections.abc import Generator
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "homie-stays")

import boto3
import pytest
from moto import mock_aws
from mypy_boto3_dynamodb.service_resource import Table

from models.common import (
    Booking,
    Extra,
    PriceBreakdown,
    PricingBasis,
    PricingRule,
    Property,
    PropertyStatus,
)

SENDER_EMAIL = "noreply@homiestays.com"


@pytest.fixture(scope="function")
def aws_credentials() -> None:
    """Mock AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture(scope="function")
def aws(aws_credentials: None) -> Generator:
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb(aws: None):
    return boto3.resource("dynamodb")


@pytest.fixture(scope="function")
def ses(aws: None):
    client = boto3.client("ses")
    client.verify_email_identity(EmailAddress=SENDER_EMAIL)
    return client


@pytest.fixture(scope="function")
def ssm(aws: None):
    return boto3.client("ssm")


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb, ssm) -> Table:
    """Create a DynamoDB table for testing."""
    table_name = "homie-stays-test"

    table = dynamodb.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "GSI1PK", "AttributeType": "S"},
            {"AttributeName": "GSI1SK", "AttributeType": "S"},
            {"AttributeName": "GSI2PK", "AttributeType": "S"},
            {"AttributeName": "GSI2SK", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "GSI1",
                "KeySchema": [
                    {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                    {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "GSI2",
                "KeySchema": [
                    {"AttributeName": "GSI2PK", "KeyType": "HASH"},
                    {"AttributeName": "GSI2SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )

    ssm.put_parameter(
        Name="/homie-stays/dynamodb/table_name", Value=table_name, Type="String"
    )

    return table


@pytest.fixture
def breakfast() -> Extra:
    return Extra(name="Breakfast", price=Decimal("20"), pricing_basis=PricingBasis.PER_PERSON)


@pytest.fixture
def sample_pricing_rule(breakfast: Extra) -> PricingRule:
    """Create a sample pricing rule."""
    return PricingRule(
        base_price_per_night=Decimal("100"),
        weekend_price_per_night=Decimal("150"),
        weekly_discount_percent=10,
        extras=[
            breakfast,
            Extra(name="Airport pickup", price=Decimal("35"), pricing_basis=PricingBasis.PER_STAY),
            Extra(name="Parking", price=Decimal("5"), pricing_basis=PricingBasis.PER_NIGHT),
        ],
    )


@pytest.fixture
def sample_property(sample_pricing_rule: PricingRule) -> Property:
    """Create a sample approved property."""
    return Property(
        id=uuid4(),
        name="Sunset Villa",
        location="Monrovia, Liberia",
        owner_id="vendor-1",
        max_guests=4,
        status=PropertyStatus.APPROVED,
        pricing=sample_pricing_rule,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def make_booking(sample_property: Property):
    """Build bookings for the sample property."""

    def _make(check_in: date, check_out: date, user_id: str = "user-1") -> Booking:
        nights = (check_out - check_in).days
        price = PriceBreakdown(
            nights=nights,
            weekday_nights=nights,
            base_price=Decimal("100") * nights,
            service_fee=Decimal("50"),
            total=Decimal("100") * nights + Decimal("50"),
        )
        return Booking(
            id=uuid4(),
            property_id=sample_property.id,
            user_id=user_id,
            property_name=sample_property.name,
            property_location=sample_property.location,
            check_in_date=check_in,
            check_out_date=check_out,
            guests=2,
            price=price,
            total_price=price.total,
            created_at=datetime.now(timezone.utc),
            updated_at=datetime.now(timezone.utc),
        )

    return _make


@pytest.fixture
def sample_booking(make_booking) -> Booking:
    return make_booking(date(2025, 6, 1), date(2025, 6, 4))


@pytest.fixture
def future_dates() -> tuple[date, date]:
    """A three-night stay well in the future."""
    check_in = date.today() + timedelta(days=30)
    return check_in, check_in + timedelta(days=3)


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    return SimpleNamespace(
        function_name="homie-stays-test",
        memory_limit_in_mb=128,
        invoked_function_arn="arn:aws:lambda:eu-west-1:123456789012:function:homie-stays-test",
        aws_request_id="request-id",
    )


@pytest.fixture
def api_gateway_event():
    """Build API Gateway proxy events."""

    def _event(path_parameters=None, body=None, claims=None) -> dict:
        request_context = {
            "accountId": "123456789012",
            "apiId": "api-id",
            "requestId": "id",
            "stage": "$default",
        }
        if claims is not None:
            request_context["authorizer"] = {"claims": claims}
        return {
            "resource": "/",
            "path": "/",
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/json"},
            "queryStringParameters": {},
            "pathParameters": path_parameters or {},
            "requestContext": request_context,
            "body": json.dumps(body) if body is not None else None,
            "isBase64Encoded": False,
        }

    return _event


@pytest.fixture
def verified_claims() -> dict:
    return {"sub": "user-1", "email": "guest@example.com", "email_verified": "true"}
