"""Execution context supplied by the job framework on every call."""

from pydantic import BaseModel, ConfigDict


class ExecutionContext(BaseModel):
    """Per-invocation environment and secrets. Read-only for this action."""

    model_config = ConfigDict(frozen=True)

    environment: dict[str, str] = {}
    secrets: dict[str, str] = {}

    def secret(self, name: str) -> str | None:
        """Return a secret, treating an empty string as absent."""
        return self.secrets.get(name) or None

    def env(self, name: str) -> str | None:
        """Return an environment value, treating an empty string as absent."""
        return self.environment.get(name) or None
