"""Namespace rewrite rules.

Every topic a team client touches lives under `<team>/` on the broker side.
Ingress publishes, subscriptions and unsubscriptions gain the prefix
unconditionally; egress publishes lose it only when it is present, since
retained or system messages may arrive without it.

Shared subscriptions (`$share/<group>/<filter>`) keep the group segment in
front, so the team goes between the group and the real filter.
"""

import logging
from typing import NamedTuple

from multi_tenant.exceptions import MalformedSharedFilterError, RewriteError
from multi_tenant.models import (
    BrokerEvent,
    ConnectEvent,
    EventKind,
    MessageEvent,
    SubscribeEvent,
    UnsubscribeEvent,
)
from multi_tenant.patterns import SHARED_SUBSCRIPTION_MARKER, PatternStore
from multi_tenant.resolver import TeamResolver

logger = logging.getLogger(__name__)


class SharedSubscription(NamedTuple):
    """A `$share/...` filter split into its group prefix and inner filter."""

    share_prefix: str
    inner_filter: str


def _join(*parts: str) -> str:
    try:
        return "/".join(parts)
    except MemoryError as e:
        raise RewriteError("Unable to build rewritten topic") from e


def rewrite_client_id(team: str, client_id: str) -> str:
    """Tag a client identifier with its team: `ID@team`."""
    try:
        return f"{client_id}@{team}"
    except MemoryError as e:
        raise RewriteError("Unable to build client identifier") from e


def add_team_prefix(team: str, topic: str) -> str:
    """Place a topic under the team namespace."""
    return _join(team, topic)


def strip_team_prefix(team: str, topic: str) -> str:
    """
    Remove the team namespace from a topic, if present.

    Only an exact `team + "/"` prefix is removed; anything else is
    returned unchanged.
    """
    prefix = f"{team}/"
    if topic.startswith(prefix):
        return topic[len(prefix):]
    return topic


def is_shared_subscription(topic_filter: str) -> bool:
    return topic_filter.startswith(SHARED_SUBSCRIPTION_MARKER)


def split_shared_subscription(patterns: PatternStore, topic_filter: str) -> SharedSubscription:
    """
    Split a shared subscription filter.

    Raises:
        MalformedSharedFilterError: If the filter lacks a group or an inner filter.
    """
    match = patterns.split_shared(topic_filter)
    if match is None:
        raise MalformedSharedFilterError(topic_filter)
    return SharedSubscription(share_prefix=match.group(1), inner_filter=match.group(2))


def rewrite_filter(patterns: PatternStore, team: str, topic_filter: str) -> str:
    """
    Place a subscription filter under the team namespace.

    `$share/g/sensors/#` becomes `$share/g/<team>/sensors/#`; any other
    filter gets the plain team prefix.

    Raises:
        MalformedSharedFilterError: For a `$share/` filter that cannot be split.
    """
    if is_shared_subscription(topic_filter):
        shared = split_shared_subscription(patterns, topic_filter)
        return _join(shared.share_prefix, team, shared.inner_filter)
    return add_team_prefix(team, topic_filter)


class NamespaceRewriter:
    """
    Applies the rewrite rule for each event kind.

    Holds only the shared, read-only pattern store; each call derives its
    team afresh, so instances can serve concurrent events.
    """

    def __init__(self, patterns: PatternStore) -> None:
        self.patterns = patterns
        self.resolver = TeamResolver(patterns)

    def connect(self, team: str, event: ConnectEvent) -> ConnectEvent:
        client = event.client.model_copy(
            update={"client_id": rewrite_client_id(team, event.client.client_id)}
        )
        return event.model_copy(update={"client": client})

    def message_in(self, team: str, event: MessageEvent) -> MessageEvent:
        return event.model_copy(update={"topic": add_team_prefix(team, event.topic)})

    def message_out(self, team: str, event: MessageEvent) -> MessageEvent:
        topic = strip_team_prefix(team, event.topic)
        if topic == event.topic:
            return event
        return event.model_copy(update={"topic": topic})

    def subscribe(self, team: str, event: SubscribeEvent) -> SubscribeEvent:
        return event.model_copy(
            update={"topic_filter": rewrite_filter(self.patterns, team, event.topic_filter)}
        )

    def unsubscribe(self, team: str, event: UnsubscribeEvent) -> UnsubscribeEvent:
        return event.model_copy(
            update={"topic_filter": rewrite_filter(self.patterns, team, event.topic_filter)}
        )

    def apply(self, kind: EventKind, team: str, event: BrokerEvent) -> BrokerEvent:
        """Rewrite an event for a resolved team."""
        rule = getattr(self, kind.value)
        return rule(team, event)
