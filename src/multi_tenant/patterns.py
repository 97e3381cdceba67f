"""Compiled matchers for tenant extraction and shared subscriptions."""

import logging
import re
from dataclasses import dataclass, field

from multi_tenant.exceptions import EngineNotReadyError, PatternCompileError

logger = logging.getLogger(__name__)

DEFAULT_TENANT_PATTERN = r"^[a-z0-9]+@([a-z0-9]+)$"
SHARED_SUBSCRIPTION_PATTERN = r"^(\$share/[^/]+)/(.+)\Z"
SHARED_SUBSCRIPTION_MARKER = "$share/"


def _compile(source: str, groups: int, label: str, flags: int = 0) -> re.Pattern[str]:
    """Compile a pattern and check its capture group count."""
    try:
        compiled = re.compile(source, flags)
    except re.error as e:
        raise PatternCompileError(
            f"Invalid {label} pattern: {e}",
            pattern=source,
        ) from e

    if compiled.groups != groups:
        raise PatternCompileError(
            f"{label.capitalize()} pattern must have exactly {groups} capture "
            f"group(s), found {compiled.groups}",
            pattern=source,
        )
    return compiled


@dataclass(frozen=True)
class PatternStore:
    """
    Owns the two compiled matchers used by the rewrite engine.

    Built once before any event is dispatched and only read afterwards,
    so a single instance is shared by every concurrent call.

    Matching mirrors POSIX `regexec`: the pattern is searched for in the
    subject, so only the pattern's own anchors pin it to the ends.
    """

    tenant_source: str
    _tenant: re.Pattern[str] | None = field(repr=False)
    _shared: re.Pattern[str] | None = field(repr=False)

    @classmethod
    def compile(cls, tenant_pattern_source: str | None = None) -> "PatternStore":
        """
        Compile the tenant and shared-subscription patterns.

        Args:
            tenant_pattern_source: Pattern with exactly one capture group.
                Uses DEFAULT_TENANT_PATTERN when absent.

        Returns:
            A ready PatternStore.

        Raises:
            PatternCompileError: If either pattern is malformed or the tenant
                pattern does not have exactly one capture group.
        """
        source = DEFAULT_TENANT_PATTERN if tenant_pattern_source is None else tenant_pattern_source
        tenant = _compile(source, 1, "tenant")
        # the inner filter is everything after the group, newlines included
        shared = _compile(SHARED_SUBSCRIPTION_PATTERN, 2, "shared subscription", re.DOTALL)

        logger.info(f"Tenant pattern compiled: {source!r}")
        return cls(tenant_source=source, _tenant=tenant, _shared=shared)

    @property
    def is_ready(self) -> bool:
        return self._tenant is not None and self._shared is not None

    def tenant_match(self, username: str) -> re.Match[str] | None:
        """Search the tenant pattern in a username."""
        tenant = self._tenant
        if tenant is None:
            raise EngineNotReadyError()
        return tenant.search(username)

    def split_shared(self, topic_filter: str) -> re.Match[str] | None:
        """Match a filter against the shared-subscription pattern."""
        shared = self._shared
        if shared is None:
            raise EngineNotReadyError()
        return shared.search(topic_filter)

    def release(self) -> None:
        """Drop the compiled matchers at shutdown."""
        object.__setattr__(self, "_tenant", None)
        object.__setattr__(self, "_shared", None)
        logger.debug("Pattern store released")
