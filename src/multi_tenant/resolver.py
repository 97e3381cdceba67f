"""Team extraction from client usernames."""

import logging
import re

from multi_tenant.patterns import PatternStore

logger = logging.getLogger(__name__)

# usernames carrying these never resolve to a team
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class TeamResolver:
    """
    Derives a client's team from its username.

    The team is the text captured by the tenant pattern's single group,
    e.g. `foo@bar` gives `bar` with the default pattern. Clients without a
    username, or whose username does not match, have no team and are left
    unisolated. Usernames containing control characters never have a team.
    """

    def __init__(self, patterns: PatternStore) -> None:
        self.patterns = patterns

    def resolve(self, username: str | None) -> str | None:
        """
        Resolve the team for a username.

        Args:
            username: The client's username, None for anonymous clients.

        Returns:
            The team, or None when no team applies.
        """
        if username is None:
            return None

        if _CONTROL_CHARS.search(username):
            logger.debug(f"No team for username with control characters: {username!r}")
            return None

        match = self.patterns.tenant_match(username)
        if match is None:
            logger.debug(f"No team for username {username!r}")
            return None

        team = match.group(1)
        if not team:
            # group matched empty or did not participate
            logger.debug(f"Empty team capture for username {username!r}")
            return None

        return team
