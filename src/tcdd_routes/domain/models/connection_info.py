"""Connection info domain model."""

from pydantic import BaseModel, ConfigDict


class ConnectionInfo(BaseModel):
    """Graph-level connectivity between two stations."""

    model_config = ConfigDict(frozen=True)

    has_direct: bool
    possible_transfer_stations: list[int] = []
