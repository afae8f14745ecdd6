from typing import List, Optional
import argparse
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from social.graze.naming.resolve.preferred_id import (
    PreferredIdResolver,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionSuccess,
)
from social.graze.naming.resolve.registry import (
    DatabaseRegistryLookup,
    StaticRegistryLookup,
)

logger = logging.getLogger(__name__)


async def resolve_with_files(
    files: List[str], request: ResolutionRequest
) -> ResolutionOutcome:
    from social.graze.naming.app.resources import read_naming_systems

    records = [naming_system.to_record() for naming_system in read_naming_systems(files)]
    return await PreferredIdResolver(StaticRegistryLookup(records)).resolve(request)


async def resolve_with_database(
    pg_dsn: Optional[str], request: ResolutionRequest
) -> ResolutionOutcome:
    from social.graze.naming.app.config import Settings

    if pg_dsn is None:
        pg_dsn = str(Settings().pg_dsn)  # type: ignore

    engine = create_async_engine(pg_dsn)
    try:
        database_session_maker = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        resolver = PreferredIdResolver(DatabaseRegistryLookup(database_session_maker))
        return await resolver.resolve(request)
    finally:
        await engine.dispose()


async def realMain() -> int:
    parser = argparse.ArgumentParser(
        prog="naming-resolve",
        description="Resolve an identifier to its preferred representation",
    )
    parser.add_argument("id", help="The identifier value to resolve.")
    parser.add_argument("type", help="The requested type (oid, uri, uuid, urn, other).")
    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        help="Resolve against NamingSystem JSON file(s) instead of the database.",
    )
    parser.add_argument(
        "--pg-dsn",
        default=None,
        help="The database to use. Defaults to the PG_DSN / DATABASE_URL setting.",
    )

    args = vars(parser.parse_args())

    request = ResolutionRequest(value=args.get("id"), requested_kind=args.get("type"))

    files: List[str] = args.get("files", [])
    if len(files) > 0:
        outcome = await resolve_with_files(files, request)
    else:
        outcome = await resolve_with_database(args.get("pg_dsn", None), request)

    if isinstance(outcome, ResolutionSuccess):
        print(outcome.value)
        return 0

    print(f"{outcome.kind.name}: {outcome.detail}", file=sys.stderr)
    return 1


def main() -> None:
    sys.exit(asyncio.run(realMain()))


if __name__ == "__main__":
    main()
