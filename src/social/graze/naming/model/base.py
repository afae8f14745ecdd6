"""Declarative base and column annotations shared by the registry models."""

from datetime import datetime
from typing import Annotated

from sqlalchemy import DateTime, MetaData, String, orm
from sqlalchemy.orm import mapped_column

str64 = Annotated[str, 64]
str512 = Annotated[str, 512]
str1024 = Annotated[str, 1024]
guidpk = Annotated[str, mapped_column(String(512), primary_key=True)]
timestamptz = Annotated[datetime, mapped_column(DateTime(timezone=True))]

# PostgreSQL default constraint names, as created by alembic/versions.
NAMING_CONVENTION = {
    "pk": "%(table_name)s_pkey",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
}


class Base(orm.DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map = {
        str64: String(64),
        str512: String(512),
        str1024: String(1024),
        guidpk: String(512),
    }
