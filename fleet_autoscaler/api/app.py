"""
Fleet Autoscaler API — FastAPI endpoints.

Exposes the tick driver to operators for:
- Loop status and configuration
- Inspection of the current WorldView
- Tick history
- Manually triggered ticks
"""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from fleet_autoscaler.controller.loop import AutoscalerLoop
from fleet_autoscaler.errors import AutoscalerError, ConfigurationError
from fleet_autoscaler.models.autoscaler import AutoscalerConfig, TickRecord
from fleet_autoscaler.sources.base import NodeManagerSource, WorkQueueSource


# --- Response Models ---

class TickResponse(BaseModel):
    record: TickRecord
    world: dict


# --- Application Factory ---

def create_app(
    work_queue: WorkQueueSource,
    node_manager: NodeManagerSource,
    config: Optional[AutoscalerConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Fleet Autoscaler API",
        description="Just-in-time compute fleet autoscaler",
        version="0.1.0",
    )

    loop = AutoscalerLoop(work_queue, node_manager, config)
    app.state.autoscaler = loop

    @app.get("/autoscaler/status")
    def autoscaler_status():
        """Current loop status."""
        last = loop.history[-1] if loop.history else None
        return {
            "status": loop.status,
            "config": loop.config.model_dump(mode="json"),
            "has_world": loop.world is not None,
            "ticks_recorded": len(loop.history),
            "last_tick": last.model_dump(mode="json") if last else None,
        }

    @app.get("/autoscaler/world")
    def get_world():
        """The last successfully reconciled WorldView."""
        if loop.world is None:
            raise HTTPException(404, "No successful tick yet")
        return loop.world.model_dump(mode="json")

    @app.get("/autoscaler/history")
    def get_history(limit: int = 50):
        """Most recent tick records, oldest first."""
        records = loop.history[-limit:] if limit > 0 else []
        return [r.model_dump(mode="json") for r in records]

    @app.post("/autoscaler/tick", response_model=TickResponse)
    async def trigger_tick():
        """Run one tick now."""
        try:
            record = await loop.run_once()
        except ConfigurationError as e:
            raise HTTPException(409, str(e))
        except AutoscalerError as e:
            raise HTTPException(503, str(e))
        return TickResponse(record=record, world=loop.world.model_dump(mode="json"))

    @app.get("/autoscaler/config")
    def get_config():
        """Current autoscaler configuration."""
        return loop.config.model_dump(mode="json")

    @app.put("/autoscaler/config")
    def update_config(new_config: AutoscalerConfig):
        """Replace the autoscaler configuration."""
        loop.config = new_config
        return new_config.model_dump(mode="json")

    return app
