import sqlalchemy
from sqlalchemy import Column, MetaData, String
from sqlalchemy.orm import declarative_base
from uuid_extension import uuid7

# Named constraints keep sqlite and server backends producing the same schema
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "pk": "pk_%(table_name)s",
    }
)

Base = declarative_base(metadata=metadata)


class StoredRecord(Base):
    """A persisted row with a time-ordered id and write timestamps."""

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=lambda: str(uuid7()))
    created_at = Column(
        sqlalchemy.DateTime(timezone=True), server_default=sqlalchemy.func.now(), nullable=False
    )
    # bumped on every overwrite of the row's value
    updated_at = Column(
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.func.now(),
        onupdate=sqlalchemy.func.now(),
        nullable=False,
    )
