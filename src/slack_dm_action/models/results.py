"""Result models returned by the entry points."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ActionResult(BaseModel):
    """Successful ``invoke`` outcome."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success"] = "success"
    user_email: str = Field(alias="userEmail")
    user_id: str = Field(alias="userId")
    text: str
    ts: str | None = None  # Slack message ts, e.g. "1609459200.000200"
    ok: bool


class RetryResult(BaseModel):
    """Signals the framework to re-invoke."""

    status: Literal["retry_requested"] = "retry_requested"


class HaltResult(BaseModel):
    """Acknowledgment returned by ``halt``."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["halted"] = "halted"
    user_email: str = Field(alias="userEmail")
    reason: str
    halted_at: str  # ISO-8601 UTC
