"""
Remote Payload Schemas.

Pydantic models for the JSON bodies returned by Synse Server. Unknown fields
are ignored so newer servers stay readable by older clients.
"""

from pydantic import BaseModel, ConfigDict, Field


class _RemoteBase(BaseModel):
    """Base for server payloads: tolerate fields we do not use."""

    model_config = ConfigDict(extra="ignore")


class ScanDevice(_RemoteBase):
    id: str
    info: str = ""
    type: str = ""


class ScanBoard(_RemoteBase):
    id: str
    devices: list[ScanDevice] = Field(default_factory=list)


class ScanRack(_RemoteBase):
    id: str
    boards: list[ScanBoard] = Field(default_factory=list)


class ScanResponse(_RemoteBase):
    """Body of the scan route: racks, their boards, and their devices."""

    racks: list[ScanRack] = Field(default_factory=list)


class PowerDetails(_RemoteBase):
    """Power state reported for one power device."""

    input_power: float = 0.0
    over_current: bool = False
    power_ok: bool = False
    power_status: str = ""
