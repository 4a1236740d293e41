"""Job parameter models for the invoke, error and halt entry points.

Wire names are camelCase (``userEmail``); attributes are snake_case. Both are
accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field


class JobParameters(BaseModel):
    """Input to ``invoke``."""

    model_config = ConfigDict(populate_by_name=True)

    user_email: str = Field(alias="userEmail")
    text: str
    delay: str | None = None  # e.g. "100ms", "1s"
    address: str | None = None  # overrides the base URL from the environment


class ErrorParameters(BaseModel):
    """Input to ``error``: the original job parameters plus the raised error."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    error: BaseException
    user_email: str | None = Field(default=None, alias="userEmail")
    text: str | None = None
    delay: str | None = None
    address: str | None = None


class HaltParameters(BaseModel):
    """Input to ``halt``."""

    model_config = ConfigDict(populate_by_name=True)

    reason: str
    user_email: str | None = Field(default=None, alias="userEmail")
