"""Shared fixtures: an in-process DynamoDB user table mocked with moto."""

import os

import boto3
import pytest
from moto import mock_aws

# Must be set before src.config builds its settings.
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["DYNAMO_ENDPOINT_URL"] = ""  # empty -> None so moto can intercept

from src.config import EMAIL_INDEX, USER_TABLE  # noqa: E402


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture
def dynamodb_client(aws_credentials):
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="us-east-1")
        yield client


@pytest.fixture
def user_table(dynamodb_client):
    """Create the user table with its email index and one user in it."""
    dynamodb_client.create_table(
        TableName=USER_TABLE,
        KeySchema=[{"AttributeName": "user_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": EMAIL_INDEX,
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    dynamodb_client.put_item(
        TableName=USER_TABLE,
        Item={"user_id": {"S": "u-1"}, "email": {"S": "alice@example.com"}},
    )
    return USER_TABLE
