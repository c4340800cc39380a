#!/usr/bin/env python3
"""
Seed the configured federation store, optionally wiping it first.

Usage:
  python scripts/reset_store.py [--clear]

The backend comes from FEDERATION_STORE_BACKEND (json, sql or memory).
"""
from __future__ import annotations

import argparse
import asyncio
import sys

from federation.app_factory import build_federation
from federation.core.app_logging import setup_logging
from federation.core.config import get_settings


async def run(clear: bool) -> dict[str, int]:
    federation = build_federation()
    if clear:
        await federation.clear_all()
    written = await federation.startup()
    counts = {}
    for repository in (
        federation.teams,
        federation.players,
        federation.events,
        federation.registrations,
        federation.users,
        federation.announcements,
    ):
        counts[repository.key] = len(await repository.list())
    for key, total in counts.items():
        print(f"  {key}: {total} ({written.get(key, 0)} seeded)")
    return counts


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed the federation store")
    ap.add_argument("--clear", action="store_true", help="wipe every key before seeding")
    args = ap.parse_args()

    settings = get_settings()
    setup_logging(settings)
    print(f"Store: {settings.store_backend}")
    asyncio.run(run(args.clear))
    print("OK: store ready")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
