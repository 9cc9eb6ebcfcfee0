"""Autoscaler configuration and tick bookkeeping."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class StopStrategy(str, Enum):
    SEQUENTIAL = "sequential"   # One at a time; keeps pending for stops already acknowledged
    PARALLEL = "parallel"       # All at once; any failure discards every pending entry


class AutoscalerConfig(BaseModel):
    """
    Configuration for the autoscaler.

    Billing is per started hour, rounded up: a node must be stopped before
    minute 59 of its hour to avoid paying for the next one.
    """

    pending_expiry_minutes: int = Field(default=10, gt=0)
    billing_period_minutes: int = Field(default=60, gt=0)
    stop_threshold_minutes: int = Field(default=58, gt=0)
    max_node_age_minutes: int = Field(default=300, gt=0)   # Hard cap, applied even when busy
    stop_strategy: StopStrategy = StopStrategy.SEQUENTIAL
    tick_interval_seconds: float = Field(default=60, gt=0)
    history_size: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _check_thresholds(self) -> "AutoscalerConfig":
        if self.stop_threshold_minutes >= self.billing_period_minutes:
            raise ValueError(
                "stop_threshold_minutes must be lower than billing_period_minutes"
            )
        return self


class TickRecord(BaseModel):
    """Outcome of one tick, kept by the host loop for inspection."""

    started_at: datetime
    world_time: Optional[datetime] = None
    action: Optional[str] = None
    node_ids: List[str] = []
    success: bool
    error: Optional[str] = None
    pending_count: int = 0
