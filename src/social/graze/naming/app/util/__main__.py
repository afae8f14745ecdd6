import argparse
import asyncio
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from social.graze.naming.app.resources import NamingSystemResource, read_naming_systems
from social.graze.naming.model.naming_system import replace_naming_system

logger = logging.getLogger(__name__)


async def import_naming_systems(
    database_session_maker: async_sessionmaker[AsyncSession],
    naming_systems: List[NamingSystemResource],
) -> int:
    """Write naming systems to the registry in a single transaction."""
    async with database_session_maker() as database_session:
        async with database_session.begin():
            for naming_system in naming_systems:
                guid = await replace_naming_system(
                    database_session,
                    naming_system.name,
                    naming_system.status,
                    naming_system.kind,
                    [
                        {"type": unique_id.type, "value": unique_id.value}
                        for unique_id in naming_system.unique_id
                    ],
                )
                logger.debug("Imported naming system %s as %s", naming_system.name, guid)
    return len(naming_systems)


async def importNamingSystems(paths: List[str], pg_dsn: Optional[str]) -> None:
    from social.graze.naming.app.config import Settings

    if pg_dsn is None:
        pg_dsn = str(Settings().pg_dsn)  # type: ignore

    naming_systems = read_naming_systems(paths)

    engine = create_async_engine(pg_dsn)
    try:
        database_session_maker = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        count = await import_naming_systems(database_session_maker, naming_systems)
        print(f"Imported {count} naming system(s)")
    finally:
        await engine.dispose()


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="naming-util", description="NamingSystem registry utilities"
    )

    parser.add_argument(
        "--pg-dsn",
        default=None,
        help="The database to use. Defaults to the PG_DSN / DATABASE_URL setting.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import", help="Import NamingSystem resources or Bundles from JSON files"
    )
    import_parser.add_argument("files", nargs="+", help="The JSON file(s) to import.")

    args = vars(parser.parse_args())
    command = args.get("command", None)

    if command == "import":
        files: List[str] = args.get("files", [])
        await importNamingSystems(files, args.get("pg_dsn", None))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
