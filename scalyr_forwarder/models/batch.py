"""
Pydantic models for decompressed CloudWatch Logs subscription batches
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InputEvent(BaseModel):
    """A single CloudWatch log event"""
    timestamp: int = Field(..., description="Milliseconds since the epoch")
    id: str = Field(..., description="CloudWatch-assigned event identifier")
    message: str = Field(..., description="Raw log line")


class InputBatch(BaseModel):
    """One decompressed CloudWatch Logs subscription payload, scoped to a single stream"""
    model_config = ConfigDict(populate_by_name=True)

    message_type: Optional[str] = Field(default=None, alias='messageType')
    owner: Optional[str] = Field(default=None, description="AWS account that owns the log group")
    log_group: Optional[str] = Field(default=None, alias='logGroup')
    log_stream: Optional[str] = Field(default=None, alias='logStream')
    subscription_filters: List[str] = Field(default_factory=list, alias='subscriptionFilters')
    log_events: Optional[List[InputEvent]] = Field(default=None, alias='logEvents')

    @model_validator(mode='after')
    def require_source_fields_with_events(self):
        """Batches that carry events must name their owner, group and stream"""
        if self.log_events:
            missing = [
                name for name, value in (
                    ('owner', self.owner),
                    ('logGroup', self.log_group),
                    ('logStream', self.log_stream)
                ) if value is None
            ]
            if missing:
                raise ValueError(f"Batch with log events is missing required fields: {', '.join(missing)}")
        return self

    @property
    def events(self) -> List[InputEvent]:
        return self.log_events or []

    @property
    def server_host(self) -> str:
        return f"cloudwatch-{self.owner}"
