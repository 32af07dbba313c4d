"""Lambda handlers for checking whether a user exists in DynamoDB."""

import base64
import binascii
import json
import logging
from functools import partial
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, Field

from src.config import EMAIL_INDEX, USER_TABLE, settings
from src.errors import ConfigError, DecodeError
from src.user_lookup import (
    ExistenceResult,
    check_user_exists,
    decode_request,
    make_dynamodb_client,
)

# Set up logging
logger = logging.getLogger()
logger.setLevel(settings.log_level)

INVALID_REQUEST = "Invalid request"
SERVER_ERROR = "Server error"


class Response(BaseModel):
    """Result returned to the caller, serialised with a camelCase statusCode."""

    status_code: int = Field(serialization_alias="statusCode")
    exists: bool = False
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    def body(self) -> dict:
        return self.model_dump(exclude={"status_code"}, exclude_none=True)


def invalid_request() -> Response:
    """400 response for a payload that could not be decoded."""
    return Response(status_code=400, exists=False, message=INVALID_REQUEST)


def server_error() -> Response:
    """500 response for a DynamoDB client that could not be set up."""
    return Response(status_code=500, exists=False, message=SERVER_ERROR)


def encode_result(result: ExistenceResult, include_message: bool = True) -> Response:
    """Map a lookup outcome to a 200 response.

    A failed lookup is reported the same way as a user that does not
    exist: callers only ever see 200 with exists=false.
    """
    return Response(
        status_code=200,
        exists=result.exists,
        message=result.message if include_message else None,
    )


class ExistenceCheckHandler:
    """Decode a payload, query the user table once and build the response."""

    def __init__(
        self,
        table_name: str = USER_TABLE,
        index_name: str = EMAIL_INDEX,
        client_factory: Optional[Callable[[], Any]] = None,
        include_message: bool = True,
    ):
        self.table_name = table_name
        self.index_name = index_name
        self.client_factory = client_factory or partial(make_dynamodb_client, settings)
        self.include_message = include_message

    def handle(self, payload: Any, parsed: bool = False) -> Response:
        """Answer one request.

        Args:
            payload: Raw JSON text, or the decoded event when parsed is set
            parsed: Whether the runtime already decoded the payload
        """
        try:
            request = decode_request(payload, parsed=parsed)
        except DecodeError as e:
            logger.error(f"Invalid request: {str(e.cause or e)}")
            return invalid_request()

        try:
            client = self.client_factory()
        except ConfigError as e:
            logger.error(f"Error loading AWS config: {str(e)}")
            return server_error()

        result = check_user_exists(
            client, request.email, self.table_name, self.index_name
        )
        return encode_result(result, self.include_message)


def _gateway_body(event: Any) -> Union[str, bytes]:
    """Pull the request body out of an API Gateway proxy event."""
    if not isinstance(event, dict):
        raise DecodeError("Event is not an API Gateway proxy event")
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError("Body is not valid base64", cause=e) from e
    return body


def lambda_handler(event: dict, context: dict) -> dict:
    """Lambda function behind an API Gateway proxy integration.

    Args:
        event: API Gateway proxy event whose body holds {"email": ...}
        context: Lambda context object

    Returns:
        dict: Proxy response with status code and JSON body {"exists": ...}
    """
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    try:
        payload = _gateway_body(event)
    except DecodeError as e:
        logger.error(f"Invalid request: {str(e)}")
        result = invalid_request()
    else:
        result = ExistenceCheckHandler(include_message=False).handle(payload)

    response = {
        "statusCode": result.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(result.body()),
    }
    logger.info(f"Returning response: {json.dumps(response)}")
    return response


def direct_handler(event: Any, context: dict) -> dict:
    """Lambda function invoked directly with {"email": ...} as its payload.

    Args:
        event: Request payload as decoded by the runtime, must be an object
        context: Lambda context object

    Returns:
        dict: {"statusCode": ..., "exists": ..., "message": ...}
    """
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    response = ExistenceCheckHandler().handle(event, parsed=True).to_dict()
    logger.info(f"Returning response: {json.dumps(response)}")
    return response
