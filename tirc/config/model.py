from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_HOST, DEFAULT_PORT


def _normalize_channel(channel: str) -> str:
    channel = channel.strip()
    if not channel:
        return ""
    return channel if channel[0] in "#&+!" else f"#{channel}"


class ClientConfig(BaseModel):
    """Connection settings for one client.

    Attributes:
        host: Server hostname.
        port: Server port.
        user: Username sent in USER.
        nick: Nickname sent in NICK.
        realname: Real name sent in USER.
        password: Connection password; PASS is only sent when non-empty.
        hostname: Local host name recorded in the client identity.
        channels: Channels joined after registration.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    user: str = Field(default="botu", min_length=1)
    nick: str = Field(default="botn", min_length=1, max_length=30)
    realname: str = "cool guy"
    password: str = ""
    hostname: str = "localhost"
    channels: list[str] = Field(default_factory=lambda: ["#general"])

    @field_validator("nick", "user")
    @classmethod
    def validate_no_spaces(cls, v: str) -> str:
        """Nick and user travel as middle parameters and cannot hold spaces."""
        if any(c.isspace() for c in v):
            raise ValueError("must not contain whitespace")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        """Add a missing ``#``, drop empties and duplicates, keep order."""
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, list):
            raise ValueError("channels must be a list")
        validated = [
            _normalize_channel(c) for c in v if isinstance(c, str)
        ]
        return list(dict.fromkeys(c for c in validated if c))

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientConfig:
        return cls.model_validate(data)

    def to_dict(self, include_secrets: bool = False) -> dict[str, Any]:
        data = self.model_dump()
        if not include_secrets and data.get("password"):
            data["password"] = "***"
        return data
