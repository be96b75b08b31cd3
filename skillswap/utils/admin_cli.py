#!/usr/bin/env python
"""
Command-line utility for SkillSwap administration.

Usage:
    python -m skillswap.utils.admin_cli create-admin --name "Ada" --email ada@example.com --password secret123
    python -m skillswap.utils.admin_cli stats
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv

from ..core.config import Settings, get_settings
from ..core.exceptions import SkillSwapError
from ..core.storage import DocumentStore
from ..core.supabase import build_store
from ..schemas.user import Role, UserCreate
from ..services.admin_service import AdminService
from ..services.user_service import UserService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SkillSwap administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_admin = subparsers.add_parser("create-admin", help="Register an admin account")
    create_admin.add_argument("--name", type=str, required=True, help="Display name")
    create_admin.add_argument("--email", type=str, required=True, help="Login email")
    create_admin.add_argument("--password", type=str, required=True, help="Password (at least 8 characters)")

    subparsers.add_parser("stats", help="Print the platform report as JSON")
    return parser


async def run(args: argparse.Namespace, store: DocumentStore, settings: Settings) -> dict:
    if args.command == "create-admin":
        user = await UserService(store, settings).register(
            UserCreate(name=args.name, email=args.email, password=args.password),
            role=Role.ADMIN,
        )
        return {"id": user["id"], "email": user["email"], "role": user["role"]}

    report = await AdminService(store, settings).report()
    report["generated_at"] = report["generated_at"].isoformat()
    return report


async def main(argv: Optional[List[str]] = None, store: Optional[DocumentStore] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    settings = get_settings()
    store = store or build_store(settings)

    try:
        result = await run(args, store, settings)
    except SkillSwapError as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
