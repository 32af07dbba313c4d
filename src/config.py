"""Runtime settings and the fixed names of the user table and its email index."""

from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

USER_TABLE = "troggle_user"
EMAIL_INDEX = "email-index"


class Settings(BaseSettings):
    """Settings read from the Lambda environment."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Normally set by the Lambda runtime
    aws_region: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION"),
    )

    # LocalStack endpoint, empty means real AWS
    dynamo_endpoint_url: Optional[str] = None

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


settings = Settings()
