"""Identifier registry records and lookups.

The registry stores one record per NamingSystem with every unique id it is known
by. A lookup finds the records that have a unique id equal to a given value,
whatever the type of that unique id.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from social.graze.naming.model.naming_system import NamingSystem, UniqueId

logger = logging.getLogger(__name__)


class RepresentationKind(str, Enum):
    """NamingSystem unique id type.

    Values are the registry's canonical codes and are compared case-sensitively.
    """

    oid = "oid"
    uuid = "uuid"
    uri = "uri"
    urn = "urn"
    other = "other"


REPRESENTATION_KINDS: Dict[str, RepresentationKind] = {
    kind.value: kind for kind in RepresentationKind
}


def parse_representation_kind(value: Optional[str]) -> Optional[RepresentationKind]:
    """Map a type code onto a representation kind, ignoring case.

    Args:
        value: Type code as supplied by a caller or stored in the registry (e.g. "Oid")

    Returns:
        The matching RepresentationKind, None if the code is not recognized
    """
    if value is None:
        return None
    return REPRESENTATION_KINDS.get(value.lower())


class Representation(BaseModel):
    """One unique id of an identifier system."""

    kind: RepresentationKind
    value: str


class IdentifierRecord(BaseModel):
    """Registry entry for one identifier system and all of its unique ids."""

    name: Optional[str] = None
    representations: List[Representation] = []

    def representations_of(self, kind: RepresentationKind) -> List[Representation]:
        return [r for r in self.representations if r.kind == kind]


class RegistryLookup(Protocol):
    """Query capability the resolver depends on."""

    async def search(self, value: str) -> Sequence[IdentifierRecord]:
        """Return the records having a unique id equal to value, in registry order."""
        ...


class StaticRegistryLookup:
    """Lookup over a fixed, in-memory list of records."""

    def __init__(self, records: Iterable[IdentifierRecord]) -> None:
        self.records = list(records)

    async def search(self, value: str) -> Sequence[IdentifierRecord]:
        return [
            record
            for record in self.records
            if any(r.value == value for r in record.representations)
        ]


def build_record(
    name: Optional[str], unique_ids: Iterable[Tuple[str, str]]
) -> IdentifierRecord:
    """Build a record from (type, value) pairs, keeping their order.

    Unique ids with a type outside the known vocabulary can never be requested,
    so they are left out of the record.
    """
    representations: List[Representation] = []
    for type_code, value in unique_ids:
        kind = parse_representation_kind(type_code)
        if kind is None:
            logger.debug(
                "Skipping unique id %r of %s with unknown type %r",
                value,
                name,
                type_code,
            )
            continue
        representations.append(Representation(kind=kind, value=value))
    return IdentifierRecord(name=name, representations=representations)


def record_from_naming_system(naming_system: NamingSystem) -> IdentifierRecord:
    """Convert a stored NamingSystem into an IdentifierRecord."""
    return build_record(
        naming_system.name,
        [(unique_id.type, unique_id.value) for unique_id in naming_system.unique_ids],
    )


class DatabaseRegistryLookup:
    """Lookup backed by the naming_systems tables.

    Matching systems are returned oldest first, so the first record for a value
    only changes when the registry itself changes.
    """

    def __init__(self, database_session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.database_session_maker = database_session_maker

    async def search(self, value: str) -> Sequence[IdentifierRecord]:
        matching_guids = select(UniqueId.naming_system_guid).where(
            UniqueId.value == value
        )
        stmt = (
            select(NamingSystem)
            .where(NamingSystem.guid.in_(matching_guids))
            .options(selectinload(NamingSystem.unique_ids))
            .order_by(NamingSystem.created_at, NamingSystem.guid)
        )
        async with self.database_session_maker() as database_session:
            naming_systems = (await database_session.scalars(stmt)).all()
            return [record_from_naming_system(ns) for ns in naming_systems]
