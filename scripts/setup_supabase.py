#!/usr/bin/env python3
"""Supabase database setup script for ReelLens.

Prints the SQL that creates the reel records table. Copy the output into the
Supabase SQL Editor and run it.

Usage:
    # Print SQL to console
    python scripts/setup_supabase.py

    # Save SQL to file
    python scripts/setup_supabase.py --output setup.sql

    # Check the configured table is reachable
    python scripts/setup_supabase.py --verify
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime

# =============================================================================
# SQL Schema Definitions
# =============================================================================

SCHEMA_SQL = """
-- =============================================================================
-- ReelLens Database Schema for Supabase
-- =============================================================================
-- Generated: {generated_at}
-- =============================================================================

CREATE TABLE IF NOT EXISTS {table} (
    -- One row per reel URL; upserts conflict on this column
    url TEXT PRIMARY KEY,
    reel_id TEXT NOT NULL DEFAULT '',

    -- Display name and its lowercased lookup key
    username TEXT NOT NULL DEFAULT '',
    username_key TEXT NOT NULL DEFAULT '',

    post_date TIMESTAMPTZ,
    engagement_rate DOUBLE PRECISION NOT NULL DEFAULT 0,
    category TEXT NOT NULL DEFAULT 'general',

    -- Full record as JSON
    data JSONB NOT NULL,

    last_updated TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{table}_username_key ON {table}(username_key, post_date DESC);
CREATE INDEX IF NOT EXISTS idx_{table}_last_updated ON {table}(last_updated DESC);

COMMENT ON TABLE {table} IS 'Analyzed Instagram reels';
COMMENT ON COLUMN {table}.username_key IS 'Lowercased username without leading @';
COMMENT ON COLUMN {table}.data IS 'Complete reel record (scraped fields, metrics, analysis)';
"""

DROP_SQL = """
DROP TABLE IF EXISTS {table} CASCADE;
"""


def get_setup_sql(table: str = "reels") -> str:
    """Get the setup SQL with timestamp."""
    return SCHEMA_SQL.format(
        table=table,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )


def get_drop_sql(table: str = "reels") -> str:
    """Get the SQL to drop the table (use with caution!)."""
    return DROP_SQL.format(table=table)


async def verify_table() -> bool:
    """Check that the configured Supabase table answers a query."""
    from reellens.config.settings import get_settings
    from reellens.core.exceptions import ConfigurationError
    from reellens.storage.supabase_store import SupabaseReelStore

    settings = get_settings()
    key = settings.supabase_key.get_secret_value() if settings.supabase_key else None
    try:
        store = SupabaseReelStore(url=settings.supabase_url, key=key, table=settings.reels_table)
    except ConfigurationError as e:
        print(f"[-] {e.message}")
        return False

    healthy = await store.health_check()
    print(f"{'[+]' if healthy else '[-]'} {settings.reels_table}: {'OK' if healthy else 'MISSING'}")
    return healthy


def main():
    """Main entry point for the setup script."""
    parser = argparse.ArgumentParser(description="Generate Supabase setup SQL for ReelLens")
    parser.add_argument("--output", "-o", type=str, help="Save SQL to file instead of printing")
    parser.add_argument(
        "--type", "-t",
        choices=["setup", "drop"],
        default="setup",
        help="Type of SQL to generate (default: setup)",
    )
    parser.add_argument("--table", default="reels", help="Table name (default: reels)")
    parser.add_argument("--verify", "-v", action="store_true", help="Verify the table exists")
    args = parser.parse_args()

    if args.verify:
        sys.exit(0 if asyncio.run(verify_table()) else 1)

    sql = get_setup_sql(args.table) if args.type == "setup" else get_drop_sql(args.table)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(sql)
        print(f"SQL saved to: {args.output}")
    else:
        print(sql)


if __name__ == "__main__":
    main()
