"""
Schema for the status endpoint.
"""

from pydantic import BaseModel, ConfigDict, Field


class StatusResponse(BaseModel):
    """
    Health check response.

    Serialized with its wire name: {"Status":"OK"}
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: str = Field(default="OK", alias="Status", description="Service status")
