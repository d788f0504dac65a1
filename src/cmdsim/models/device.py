"""Device-related models."""

from pydantic import BaseModel, ConfigDict


class Device(BaseModel):
    """A device that commands can be scheduled for."""

    model_config = ConfigDict(frozen=True)

    device_id: str
