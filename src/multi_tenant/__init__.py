"""Tenant isolation for MQTT brokers by topic namespace rewriting."""

from multi_tenant.exceptions import (
    EngineNotReadyError,
    MalformedSharedFilterError,
    MultiTenantError,
    PatternCompileError,
    RewriteError,
)
from multi_tenant.models import (
    ClientSession,
    ConnectEvent,
    EventKind,
    EventOutcome,
    MessageEvent,
    ResultCode,
    SubscribeEvent,
    UnsubscribeEvent,
)
from multi_tenant.patterns import DEFAULT_TENANT_PATTERN, PatternStore
from multi_tenant.plugin import (
    PLUGIN_NAME,
    PLUGIN_VERSION,
    MultiTenantPlugin,
    plugin_info,
    plugin_init,
)
from multi_tenant.resolver import TeamResolver
from multi_tenant.rewriter import (
    NamespaceRewriter,
    SharedSubscription,
    add_team_prefix,
    rewrite_client_id,
    rewrite_filter,
    strip_team_prefix,
)

__all__ = [
    # Plugin
    "PLUGIN_NAME",
    "PLUGIN_VERSION",
    "MultiTenantPlugin",
    "plugin_info",
    "plugin_init",
    # Engine
    "DEFAULT_TENANT_PATTERN",
    "PatternStore",
    "TeamResolver",
    "NamespaceRewriter",
    "SharedSubscription",
    "add_team_prefix",
    "strip_team_prefix",
    "rewrite_filter",
    "rewrite_client_id",
    # Models
    "ClientSession",
    "ConnectEvent",
    "MessageEvent",
    "SubscribeEvent",
    "UnsubscribeEvent",
    "EventKind",
    "EventOutcome",
    "ResultCode",
    # Errors
    "MultiTenantError",
    "PatternCompileError",
    "MalformedSharedFilterError",
    "RewriteError",
    "EngineNotReadyError",
]
