"""Broker-facing plugin: one handler per event kind plus registration glue."""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Protocol

from multi_tenant.config import get_settings
from multi_tenant.context import EventContext, event_context
from multi_tenant.exceptions import MultiTenantError
from multi_tenant.models import (
    BrokerEvent,
    ConnectEvent,
    EventKind,
    EventOutcome,
    MessageEvent,
    ResultCode,
    SubscribeEvent,
    UnsubscribeEvent,
)
from multi_tenant.observability.logging import configure_logging
from multi_tenant.observability.metrics import MetricsRegistry, get_metrics_registry
from multi_tenant.patterns import PatternStore
from multi_tenant.rewriter import NamespaceRewriter

logger = logging.getLogger(__name__)

PLUGIN_NAME = "multi-tenant"
PLUGIN_VERSION = "1.1.0"

REGEX_OPTION = "regex"

EventCallback = Callable[[BrokerEvent], EventOutcome]


class BrokerHost(Protocol):
    """What the plugin needs from the host broker."""

    def register_callback(self, kind: EventKind, callback: EventCallback) -> int:
        ...

    def unregister_callback(self, kind: EventKind, callback: EventCallback) -> int:
        ...


def plugin_info() -> dict[str, str]:
    """Name and version reported to the host."""
    return {"name": PLUGIN_NAME, "version": PLUGIN_VERSION}


def tenant_pattern_from_options(
    options: Mapping[str, str] | Iterable[tuple[str, str]],
) -> str | None:
    """
    Find the tenant pattern among the host's plugin options.

    The `regex` key is matched case-insensitively; when repeated, the
    last one wins.
    """
    items = options.items() if isinstance(options, Mapping) else options
    pattern = None
    for key, value in items:
        if key.lower() == REGEX_OPTION:
            pattern = value
    return pattern


class MultiTenantPlugin:
    """
    Confines each team's clients to the `<team>/` topic namespace.

    Handlers are synchronous and keep no state between calls; the only
    shared value is the read-only PatternStore.

    A handler never raises for a single event. A failed rewrite is returned
    as a failing ResultCode together with the untouched event, which the
    host must refuse rather than pass through.
    """

    def __init__(
        self,
        patterns: PatternStore,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """
        Initialize the plugin.

        Args:
            patterns: Compiled tenant and shared-subscription patterns.
            metrics: Optional registry for rewrite counters.
        """
        self.patterns = patterns
        self.rewriter = NamespaceRewriter(patterns)
        self.metrics = metrics
        self._handlers: dict[EventKind, EventCallback] = {
            EventKind.CONNECT: self.on_connect,
            EventKind.MESSAGE_IN: self.on_message_in,
            EventKind.MESSAGE_OUT: self.on_message_out,
            EventKind.SUBSCRIBE: self.on_subscribe,
            EventKind.UNSUBSCRIBE: self.on_unsubscribe,
        }

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> "MultiTenantPlugin":
        """
        Build a plugin from host options, falling back to settings.

        Raises:
            PatternCompileError: If the tenant pattern is unusable.
        """
        settings = get_settings()
        source = tenant_pattern_from_options(options or {})
        if source is None:
            source = settings.tenant_regex

        if metrics is None and settings.enable_metrics:
            metrics = get_metrics_registry()

        return cls(PatternStore.compile(source), metrics=metrics)

    @property
    def handlers(self) -> dict[EventKind, EventCallback]:
        return dict(self._handlers)

    def on_connect(self, event: ConnectEvent) -> EventOutcome:
        return self._handle(EventKind.CONNECT, event)

    def on_message_in(self, event: MessageEvent) -> EventOutcome:
        return self._handle(EventKind.MESSAGE_IN, event)

    def on_message_out(self, event: MessageEvent) -> EventOutcome:
        return self._handle(EventKind.MESSAGE_OUT, event)

    def on_subscribe(self, event: SubscribeEvent) -> EventOutcome:
        return self._handle(EventKind.SUBSCRIBE, event)

    def on_unsubscribe(self, event: UnsubscribeEvent) -> EventOutcome:
        return self._handle(EventKind.UNSUBSCRIBE, event)

    def dispatch(self, kind: EventKind, event: BrokerEvent) -> EventOutcome:
        """Route an event to the handler for its kind."""
        return self._handlers[kind](event)

    def _handle(self, kind: EventKind, event: BrokerEvent) -> EventOutcome:
        client = event.client
        ctx = EventContext(event=kind, client_id=client.client_id)
        team = None

        with event_context(ctx):
            try:
                team = self.rewriter.resolver.resolve(client.username)
                if team is None:
                    self._record(kind, "passthrough")
                    return EventOutcome(event=event)

                with event_context(replace(ctx, team=team)):
                    rewritten = self.rewriter.apply(kind, team, event)
            except MultiTenantError as e:
                logger.warning(f"Refusing {kind.value} for client {client.client_id!r}: {e.message}")
                self._record(kind, "refused")
                if self.metrics:
                    self.metrics.record_rewrite_failure(kind.value, type(e).__name__)
                return EventOutcome(status=e.result_code, event=event, team=team)

            changed = rewritten is not event
            self._record(kind, "rewritten" if changed else "unchanged")
            return EventOutcome(event=rewritten, changed=changed, team=team)

    def _record(self, kind: EventKind, outcome: str) -> None:
        if self.metrics:
            self.metrics.record_rewrite(kind.value, outcome)

    def register(self, host: BrokerHost) -> int:
        """
        Register every handler with the host.

        Returns:
            The first non-success code from the host, or SUCCESS.
        """
        for kind, callback in self._handlers.items():
            rc = host.register_callback(kind, callback)
            if rc:
                logger.error(f"Failed to register {kind.value} callback: rc={rc}")
                return rc
        logger.info(f"{PLUGIN_NAME} {PLUGIN_VERSION} registered (pattern={self.patterns.tenant_source!r})")
        return ResultCode.SUCCESS

    def cleanup(self, host: BrokerHost) -> int:
        """Unregister handlers and release the compiled patterns."""
        rc = ResultCode.SUCCESS
        for kind, callback in self._handlers.items():
            result = host.unregister_callback(kind, callback)
            if result and not rc:
                rc = result
        self.patterns.release()
        logger.info(f"{PLUGIN_NAME} cleaned up")
        return rc


def plugin_init(
    host: BrokerHost,
    options: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
) -> MultiTenantPlugin:
    """
    Build the plugin and register it with the host.

    Patterns are compiled before anything is registered, so a bad pattern
    leaves the host untouched.

    Raises:
        PatternCompileError: If the tenant pattern is unusable.
        MultiTenantError: If the host rejects a registration.
    """
    settings = get_settings()
    if settings.configure_logging:
        configure_logging(level=settings.log_level, json_format=settings.log_json)

    plugin = MultiTenantPlugin.from_options(options)
    rc = plugin.register(host)
    if rc:
        raise MultiTenantError(f"Callback registration failed with rc={rc}")
    return plugin
