"""Domain exceptions for the multi-tenant rewrite engine.

Each error carries the broker result code the dispatch boundary reports
back to the host when the error ends an event call.
"""

from multi_tenant.models import ResultCode


class MultiTenantError(Exception):
    """Base exception for multi-tenant domain errors."""

    def __init__(
        self,
        message: str,
        *,
        result_code: ResultCode = ResultCode.INVAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.result_code = result_code


class PatternCompileError(MultiTenantError):
    """Raised when the tenant or shared-subscription pattern cannot be used."""

    def __init__(self, message: str, pattern: str) -> None:
        super().__init__(message, result_code=ResultCode.INVAL)
        self.pattern = pattern


class EngineNotReadyError(MultiTenantError):
    """Raised when the pattern store has been released."""

    def __init__(self, message: str = "Pattern store released") -> None:
        super().__init__(message, result_code=ResultCode.INVAL)


class MalformedSharedFilterError(MultiTenantError):
    """Raised when a `$share/` filter has no `<group>/<filter>` structure."""

    def __init__(self, topic_filter: str) -> None:
        super().__init__(
            f"Malformed shared subscription filter: {topic_filter!r}",
            result_code=ResultCode.NOMEM,
        )
        self.topic_filter = topic_filter


class RewriteError(MultiTenantError):
    """Raised when a rewritten topic, filter or identifier cannot be built."""

    def __init__(self, message: str) -> None:
        super().__init__(message, result_code=ResultCode.NOMEM)
