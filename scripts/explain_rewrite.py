#!/usr/bin/env python
"""Show how the plugin would rewrite a client's topics and filters."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from multi_tenant.exceptions import MultiTenantError
from multi_tenant.models import ClientSession, EventKind, MessageEvent, SubscribeEvent
from multi_tenant.plugin import MultiTenantPlugin


def _subject(event) -> str:
    return event.topic if isinstance(event, MessageEvent) else event.topic_filter


def main() -> int:
    parser = argparse.ArgumentParser(description="Explain multi-tenant topic rewriting")
    parser.add_argument("--username", help="Client username (omit for anonymous)")
    parser.add_argument("--client-id", default="client", help="Client identifier")
    parser.add_argument("--regex", help="Tenant pattern (default: configured or built-in)")
    parser.add_argument("--publish", action="append", default=[], help="Topic published by the client")
    parser.add_argument("--subscribe", action="append", default=[], help="Filter subscribed by the client")
    parser.add_argument("--deliver", action="append", default=[], help="Broker-side topic delivered to the client")
    args = parser.parse_args()

    try:
        plugin = MultiTenantPlugin.from_options({"regex": args.regex} if args.regex else None)
    except MultiTenantError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    client = ClientSession(client_id=args.client_id, username=args.username)
    team = plugin.rewriter.resolver.resolve(args.username)
    print(f"team: {team or '(none, pass-through)'}")

    rows = [(EventKind.MESSAGE_IN, MessageEvent(client=client, topic=t)) for t in args.publish]
    rows += [(EventKind.SUBSCRIBE, SubscribeEvent(client=client, topic_filter=f)) for f in args.subscribe]
    rows += [(EventKind.MESSAGE_OUT, MessageEvent(client=client, topic=t)) for t in args.deliver]

    for kind, event in rows:
        outcome = plugin.dispatch(kind, event)
        before = _subject(event)
        if not outcome.ok:
            print(f"{kind.value:12} {before} -> REFUSED ({outcome.status.name})")
            continue
        after = _subject(outcome.event)
        print(f"{kind.value:12} {before} -> {after}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
