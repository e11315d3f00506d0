"""Output contract for generated insights."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["critical", "warning", "info"]


class Insight(BaseModel):
    """One actionable finding about one asset.  Immutable once created."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    id: str = Field(min_length=1)
    severity: Severity
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    recommendation: str = Field(min_length=1)
    affected_asset: str = Field(min_length=1)
    generated_at: datetime
    reference_date: str | None = None
