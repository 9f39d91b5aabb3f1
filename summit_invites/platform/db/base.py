import sqlalchemy
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base
from uuid_extension import uuid7

Base = declarative_base()


def new_id() -> str:
    return str(uuid7())


class BaseModel(Base):
    """Common columns. UUIDv7 ids sort by creation time, which gives a stable
    tie-breaker wherever rows share a ``created_at`` value."""

    __abstract__ = True
    id = Column(String(36), primary_key=True, default=new_id, index=True)
    created_at = Column(
        sqlalchemy.DateTime(timezone=True), server_default=sqlalchemy.func.now(), nullable=False
    )

# Models import this Base. Import every model module in summit_invites.platform.db.models
# so that metadata is complete for create_all and alembic.
