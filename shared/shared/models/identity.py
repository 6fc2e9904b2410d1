from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Caller identity taken from a verified JWT; lives for one request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subject: str = Field(min_length=1)
