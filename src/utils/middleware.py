import functools
import json
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union
from uuid import UUID

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, ValidationError

from models.common import UserIdentity

logger = Logger()

T = TypeVar("T", bound=BaseModel)


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, UUID):
            return str(obj)
        return super().default(obj)


def error_response(status_code: int, error: str, message: str) -> Dict[str, Any]:
    return create_response(status_code, {"error": error, "message": message})


def validation_error_response(error: ValidationError) -> Dict[str, Any]:
    details = error.errors(include_url=False, include_context=False, include_input=False)
    return create_response(400, {"error": "Validation Error", "details": details})


def handle_errors(func: Callable) -> Callable:
    """Decorator to handle errors and return appropriate API responses."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"Validation error: {str(e)}")
            return validation_error_response(e)
        except ValueError as e:
            logger.warning(f"Value error: {str(e)}")
            return error_response(400, "Invalid Input", str(e))
        except Exception as e:
            logger.exception(f"Unexpected error: {str(e)}")
            return error_response(
                500, "Internal Server Error", "An unexpected error occurred"
            )

    return wrapper


def get_user_identity(event: Dict[str, Any]) -> Optional[UserIdentity]:
    """Read the signed-in user from the authorizer claims, if any."""
    request_context = event.get("requestContext") or {}
    claims = (request_context.get("authorizer") or {}).get("claims") or {}
    if not claims.get("sub") or not claims.get("email"):
        return None

    # Cognito passes claims through API Gateway as strings
    verified = claims.get("email_verified", False)
    if isinstance(verified, str):
        verified = verified.lower() == "true"

    return UserIdentity(
        user_id=claims["sub"], email=claims["email"], email_verified=bool(verified)
    )


def require_user(verified_email: bool = False) -> Callable:
    """Decorator to require a signed-in user, optionally with a verified email."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(event: Dict[str, Any], context: LambdaContext):
            user = get_user_identity(event)
            if user is None:
                return error_response(401, "Unauthorized", "Sign in required")
            if verified_email and not user.email_verified:
                logger.warning(f"Unverified email for user {user.user_id}")
                return error_response(
                    403, "Forbidden", "Verify your email address before booking"
                )
            event["user"] = user
            return func(event, context)

        return wrapper

    return decorator


def parse_body(model: Type[T]) -> Callable:
    """Decorator to parse and validate request body using Pydantic model."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(event: Dict[str, Any], context: LambdaContext):
            try:
                body = json.loads(event.get("body") or "{}")
                parsed_body = model.model_validate(body)
                event["parsed_body"] = parsed_body
            except json.JSONDecodeError:
                return error_response(
                    400, "Invalid JSON", "Request body must be valid JSON"
                )
            except ValidationError as e:
                return validation_error_response(e)
            return func(event, context)

        return wrapper

    return decorator


def get_path_uuid(event: Dict[str, Any], name: str = "id") -> Optional[UUID]:
    try:
        return UUID(event["pathParameters"][name])
    except (KeyError, ValueError, TypeError):
        return None


def create_response(
    status_code: int,
    body: Union[Dict[str, Any], BaseModel, None] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create API Gateway response with consistent format."""
    response = {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **(headers or {})},
    }

    if body is not None:
        if isinstance(body, BaseModel):
            response["body"] = body.model_dump_json()
        else:
            response["body"] = json.dumps(body, cls=DecimalEncoder)

    return response
