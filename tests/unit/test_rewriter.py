"""Unit tests for the namespace rewrite rules."""

import pytest

from multi_tenant.exceptions import MalformedSharedFilterError
from multi_tenant.models import (
    ClientSession,
    ConnectEvent,
    EventKind,
    MessageEvent,
    ResultCode,
    SubscribeEvent,
    UnsubscribeEvent,
)
from multi_tenant.rewriter import (
    NamespaceRewriter,
    SharedSubscription,
    add_team_prefix,
    is_shared_subscription,
    rewrite_client_id,
    rewrite_filter,
    split_shared_subscription,
    strip_team_prefix,
)


class TestPrefixRules:
    """Tests for add_team_prefix and strip_team_prefix."""

    def test_add_prefix(self):
        """Test that ingress topics always gain the team prefix."""
        assert add_team_prefix("acme", "sensors/temp") == "acme/sensors/temp"

    def test_add_prefix_even_when_already_prefixed(self):
        """Test that the prefix is added unconditionally."""
        assert add_team_prefix("acme", "acme/sensors") == "acme/acme/sensors"

    def test_strip_prefix(self):
        """Test that egress topics lose the team prefix."""
        assert strip_team_prefix("acme", "acme/sensors/temp") == "sensors/temp"

    def test_strip_only_once(self):
        """Test that only the leading prefix is removed."""
        assert strip_team_prefix("acme", "acme/acme/x") == "acme/x"

    @pytest.mark.parametrize(
        "topic",
        [
            "sensors/temp",
            "acme",
            "acmecorp/sensors",
            "other/acme/sensors",
            "beta/sensors",
            "$SYS/broker/uptime",
        ],
    )
    def test_strip_leaves_unprefixed_topics(self, topic):
        """Test that topics without the exact prefix are unchanged."""
        assert strip_team_prefix("acme", topic) == topic

    @pytest.mark.parametrize("topic", ["a", "a/b/c", "sensors/#", "+/x", "", "/leading", "trailing/"])
    def test_round_trip(self, topic):
        """Test that stripping undoes prefixing."""
        assert strip_team_prefix("acme", add_team_prefix("acme", topic)) == topic


class TestClientId:
    """Tests for rewrite_client_id."""

    def test_appends_team(self):
        assert rewrite_client_id("bar", "client1") == "client1@bar"


class TestSharedSubscriptions:
    """Tests for shared subscription handling."""

    def test_is_shared(self):
        assert is_shared_subscription("$share/g/a")
        assert not is_shared_subscription("share/g/a")
        assert not is_shared_subscription("$SYS/a")

    def test_split(self, patterns):
        """Test splitting into group prefix and inner filter."""
        shared = split_shared_subscription(patterns, "$share/grp/sensors/#")

        assert shared == SharedSubscription(share_prefix="$share/grp", inner_filter="sensors/#")

    def test_split_malformed(self, patterns):
        """Test that a filter with only a group fails."""
        with pytest.raises(MalformedSharedFilterError) as exc_info:
            split_shared_subscription(patterns, "$share/onlygroup")

        assert exc_info.value.topic_filter == "$share/onlygroup"
        assert exc_info.value.result_code == ResultCode.NOMEM

    def test_rewrite_shared_filter(self, patterns):
        """Test that the team goes between the group and the filter."""
        assert rewrite_filter(patterns, "T", "$share/g1/a/b/c") == "$share/g1/T/a/b/c"
        assert rewrite_filter(patterns, "acme", "$share/grp/sensors/#") == "$share/grp/acme/sensors/#"

    def test_rewrite_plain_filter(self, patterns):
        """Test that ordinary filters get the team prefix."""
        assert rewrite_filter(patterns, "acme", "sensors/#") == "acme/sensors/#"
        assert rewrite_filter(patterns, "acme", "#") == "acme/#"

    @pytest.mark.parametrize("topic_filter", ["$share/", "$share/g", "$share/g/", "$share//x"])
    def test_rewrite_malformed_shared_filter(self, patterns, topic_filter):
        """Test that malformed shared filters are never passed through."""
        with pytest.raises(MalformedSharedFilterError):
            rewrite_filter(patterns, "acme", topic_filter)


class TestNamespaceRewriter:
    """Tests for NamespaceRewriter event rules."""

    @pytest.fixture
    def rewriter(self, patterns):
        return NamespaceRewriter(patterns)

    @pytest.fixture
    def client(self):
        return ClientSession(client_id="client1", username="foo@bar")

    def test_connect(self, rewriter, client):
        event = ConnectEvent(client=client)

        result = rewriter.apply(EventKind.CONNECT, "bar", event)

        assert result.client.client_id == "client1@bar"
        assert result.client.username == "foo@bar"
        assert event.client.client_id == "client1"

    def test_message_in_keeps_payload(self, rewriter, client):
        event = MessageEvent(client=client, topic="a/b", payload=b"42", qos=1, retain=True)

        result = rewriter.apply(EventKind.MESSAGE_IN, "bar", event)

        assert result.topic == "bar/a/b"
        assert result.payload == b"42"
        assert result.qos == 1
        assert result.retain is True

    def test_message_out_unprefixed_returns_same_event(self, rewriter, client):
        event = MessageEvent(client=client, topic="$SYS/broker/uptime")

        assert rewriter.apply(EventKind.MESSAGE_OUT, "bar", event) is event

    def test_message_out_strips(self, rewriter, client):
        event = MessageEvent(client=client, topic="bar/a/b")

        assert rewriter.apply(EventKind.MESSAGE_OUT, "bar", event).topic == "a/b"

    def test_subscribe(self, rewriter, client):
        event = SubscribeEvent(client=client, topic_filter="$share/g/x/+", qos=2)

        result = rewriter.apply(EventKind.SUBSCRIBE, "bar", event)

        assert result.topic_filter == "$share/g/bar/x/+"
        assert result.qos == 2

    def test_unsubscribe_mirrors_subscribe(self, rewriter, client):
        sub = SubscribeEvent(client=client, topic_filter="x/#")
        unsub = UnsubscribeEvent(client=client, topic_filter="x/#")

        assert (
            rewriter.apply(EventKind.UNSUBSCRIBE, "bar", unsub).topic_filter
            == rewriter.apply(EventKind.SUBSCRIBE, "bar", sub).topic_filter
            == "bar/x/#"
        )


class TestSharedFilterNewlines:
    """Tests that shared filters are rewritten without losing characters."""

    @pytest.mark.parametrize(
        "topic_filter,expected",
        [
            ("$share/g/a\n", "$share/g/acme/a\n"),
            ("$share/g/a\nb", "$share/g/acme/a\nb"),
        ],
    )
    def test_whole_inner_filter_kept(self, patterns, topic_filter, expected):
        assert rewrite_filter(patterns, "acme", topic_filter) == expected
