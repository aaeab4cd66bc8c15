"""
Configuration Schemas.

Pydantic models defining the expected structure of the .synse.yaml file.
Used by the config resolver to validate the file at load time. If the file
has wrong types or unknown keys, a ConfigError is raised naming the problem
instead of a cryptic failure deep in a command.

Every key is optional:

    debug: false
    active_host: lab
    timeout: 10.0
    workers: 8
    hosts:
      - name: lab
        address: 10.1.2.3:5000
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEOUT = 10.0
DEFAULT_WORKERS = 8


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


class HostSchema(_StrictBase):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)


class ConfigFileSchema(_StrictBase):
    debug: bool | None = None
    active_host: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    workers: int | None = Field(default=None, gt=0)
    hosts: list[HostSchema] | None = None

    @field_validator("hosts")
    @classmethod
    def _unique_host_names(cls, hosts: list[HostSchema] | None) -> list[HostSchema] | None:
        names = [host.name for host in hosts or []]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate host names: {', '.join(duplicates)}")
        return hosts
