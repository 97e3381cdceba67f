"""Event records exchanged with the host broker."""

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Broker events the plugin handles."""

    CONNECT = "connect"
    MESSAGE_IN = "message_in"
    MESSAGE_OUT = "message_out"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


class ResultCode(IntEnum):
    """Status codes returned to the host broker."""

    SUCCESS = 0
    NOMEM = 1
    INVAL = 3


class ClientSession(BaseModel):
    """Read-only view of the client that triggered an event."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    username: str | None = None


class ConnectEvent(BaseModel):
    """A client has completed its connection."""

    model_config = ConfigDict(frozen=True)

    client: ClientSession


class MessageEvent(BaseModel):
    """A publish, either client-to-broker or broker-to-client."""

    model_config = ConfigDict(frozen=True)

    client: ClientSession
    topic: str
    payload: bytes = b""
    qos: int = Field(default=0, ge=0, le=2)
    retain: bool = False


class SubscribeEvent(BaseModel):
    """A single subscription request."""

    model_config = ConfigDict(frozen=True)

    client: ClientSession
    topic_filter: str
    qos: int = Field(default=0, ge=0, le=2)
    options: int = 0


class UnsubscribeEvent(BaseModel):
    """A single unsubscription request."""

    model_config = ConfigDict(frozen=True)

    client: ClientSession
    topic_filter: str


BrokerEvent = ConnectEvent | MessageEvent | SubscribeEvent | UnsubscribeEvent


class EventOutcome(BaseModel):
    """Result of handling one broker event.

    `event` is the record the host should continue with: a rewritten copy
    when `changed` is set, otherwise the original record.
    """

    model_config = ConfigDict(frozen=True)

    status: ResultCode = ResultCode.SUCCESS
    event: Any
    changed: bool = False
    team: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the host may proceed with the event."""
        return self.status == ResultCode.SUCCESS
