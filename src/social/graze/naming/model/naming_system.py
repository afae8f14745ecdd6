"""NamingSystem registry data models.

Provides SQLAlchemy models for identifier systems and the unique ids (OID, URI,
...) each system is known by, plus the statements used to load them.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import ForeignKey, Index, delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ulid import ULID

from social.graze.naming.model.base import (
    Base,
    guidpk,
    str64,
    str512,
    str1024,
    timestamptz,
)


class NamingSystem(Base):
    """Identifier system registered with the service.

    One row per system, keyed by the NamingSystem name. Its unique ids are kept
    in naming_system_unique_ids in the order they were declared.
    """

    __tablename__ = "naming_systems"

    guid: Mapped[guidpk]
    name: Mapped[str512]
    status: Mapped[str64]
    kind: Mapped[str64]
    created_at: Mapped[timestamptz]

    unique_ids: Mapped[List["UniqueId"]] = relationship(
        back_populates="naming_system",
        order_by="UniqueId.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_naming_systems_name", "name", unique=True),)


class UniqueId(Base):
    """One representation of an identifier system, e.g. its OID or its URI."""

    __tablename__ = "naming_system_unique_ids"

    guid: Mapped[guidpk]
    naming_system_guid: Mapped[str] = mapped_column(
        ForeignKey("naming_systems.guid", ondelete="CASCADE")
    )
    position: Mapped[int]
    type: Mapped[str64]
    value: Mapped[str1024]

    naming_system: Mapped[NamingSystem] = relationship(back_populates="unique_ids")

    __table_args__ = (
        Index("idx_naming_system_unique_ids_value", "value"),
        Index("idx_naming_system_unique_ids_naming_system", "naming_system_guid"),
    )


def upsert_naming_system_stmt(
    name: str, status: str, kind: str, created_at: Optional[datetime] = None
):
    """Create PostgreSQL upsert statement for a naming system.

    Updates status and kind for an existing name or inserts a new record,
    returning the GUID of the naming system. created_at is only set on insert.
    """
    if created_at is None:
        created_at = datetime.now(timezone.utc)
    return (
        insert(NamingSystem)
        .values(
            [
                {
                    "guid": str(ULID()),
                    "name": name,
                    "status": status,
                    "kind": kind,
                    "created_at": created_at,
                }
            ]
        )
        .on_conflict_do_update(
            index_elements=["name"],
            set_={
                "status": status,
                "kind": kind,
            },
        )
        .returning(NamingSystem.guid)
    )


def delete_unique_ids_stmt(naming_system_guid: str):
    return delete(UniqueId).where(UniqueId.naming_system_guid == naming_system_guid)


def insert_unique_ids_stmt(naming_system_guid: str, unique_ids: List[Dict[str, Any]]):
    """Create insert statement for the unique ids of a naming system.

    Each entry needs "type" and "value"; positions follow list order.
    """
    return insert(UniqueId).values(
        [
            {
                "guid": str(ULID()),
                "naming_system_guid": naming_system_guid,
                "position": position,
                "type": unique_id["type"],
                "value": unique_id["value"],
            }
            for position, unique_id in enumerate(unique_ids)
        ]
    )


async def replace_naming_system(
    database_session: AsyncSession,
    name: str,
    status: str,
    kind: str,
    unique_ids: List[Dict[str, Any]],
) -> str:
    """Upsert a naming system and replace all of its unique ids.

    Must be called inside a transaction. Unique id types are stored lowercased.

    Returns:
        The GUID of the naming system
    """
    naming_system_guid: str = (
        await database_session.execute(upsert_naming_system_stmt(name, status, kind))
    ).scalar_one()

    await database_session.execute(delete_unique_ids_stmt(naming_system_guid))

    normalized = [
        {"type": unique_id["type"].strip().lower(), "value": unique_id["value"]}
        for unique_id in unique_ids
    ]
    if len(normalized) > 0:
        await database_session.execute(
            insert_unique_ids_stmt(naming_system_guid, normalized)
        )
    return naming_system_guid
