"""Lookup of users by email in the DynamoDB user table."""

import logging
from enum import Enum
from typing import Any, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from src.config import EMAIL_INDEX, Settings
from src.errors import ConfigError, DecodeError, StoreQueryError

logger = logging.getLogger(__name__)

USER_EXISTS = "User exists"
USER_DOES_NOT_EXIST = "User does not exist"


class Request(BaseModel):
    """Body of a lookup request. A missing or null email becomes an empty string."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    email: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return "" if v is None else v


def decode_request(payload: Union[str, bytes, dict, Any], parsed: bool = False) -> Request:
    """Parse a request payload into a Request.

    Text and bytes are read as raw JSON unless ``parsed`` is set, in which
    case the payload is taken as the event the runtime already decoded and
    must itself be an object. A missing email is not an error, it decodes
    to an empty string.

    Raises:
        DecodeError: if the payload is not a JSON object with a string email
    """
    try:
        if not parsed and isinstance(payload, (str, bytes, bytearray)):
            return Request.model_validate_json(payload)
        return Request.model_validate(payload)
    except ValidationError as e:
        raise DecodeError("Invalid request payload", cause=e) from e


class LookupOutcome(str, Enum):
    """Result of querying the email index."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"


class ExistenceResult(BaseModel):
    """Outcome of a lookup, with the store error when the query failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: LookupOutcome
    error: Optional[StoreQueryError] = None

    @property
    def exists(self) -> bool:
        return self.outcome is LookupOutcome.FOUND

    @property
    def message(self) -> str:
        return USER_EXISTS if self.exists else USER_DOES_NOT_EXIST


def make_dynamodb_client(settings: Settings):
    """Create a DynamoDB client with region and credentials resolved up front.

    Args:
        settings: Runtime settings holding region and optional endpoint

    Returns:
        A botocore DynamoDB client

    Raises:
        ConfigError: if the region, credentials or endpoint are unusable
    """
    try:
        session = boto3.Session(region_name=settings.aws_region)
        if session.get_credentials() is None:
            raise ConfigError("Unable to locate AWS credentials")
        return session.client(
            "dynamodb", endpoint_url=settings.dynamo_endpoint_url or None
        )
    except (BotoCoreError, ValueError) as e:
        # botocore reports a malformed endpoint URL as a plain ValueError
        raise ConfigError(f"Unable to load AWS config: {str(e)}", cause=e) from e


def check_user_exists(
    client, email: str, table_name: str, index_name: str = EMAIL_INDEX
) -> ExistenceResult:
    """Check if a user with the given email exists in a DynamoDB table.

    Only the first page of the query is looked at. A failed query is
    logged and reported as LOOKUP_FAILED instead of being raised.

    Args:
        client: DynamoDB client
        email: Email to look up through the index
        table_name: Name of the user table
        index_name: Global secondary index keyed on email

    Returns:
        ExistenceResult: outcome of the lookup
    """
    logger.info(f"Checking if user exists: {email} in table {table_name}")
    try:
        response = client.query(
            TableName=table_name,
            IndexName=index_name,
            KeyConditionExpression="email = :email",
            ExpressionAttributeValues={":email": {"S": email}},
        )
    except (ClientError, BotoCoreError) as e:
        error = StoreQueryError(f"Query on {table_name} failed: {str(e)}", cause=e)
        logger.error(f"Error fetching item from DynamoDB: {str(e)}")
        return ExistenceResult(outcome=LookupOutcome.LOOKUP_FAILED, error=error)

    if len(response.get("Items", [])) > 0:
        logger.info(f"User found: {email}")
        return ExistenceResult(outcome=LookupOutcome.FOUND)

    logger.info(f"User not found: {email}")
    return ExistenceResult(outcome=LookupOutcome.NOT_FOUND)
