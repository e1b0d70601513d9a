# models/table_snapshot.py

from sqlalchemy import JSON, Column, DateTime, Integer, String, func

from db.base import Base


class TableSnapshot(Base):
    __tablename__ = "table_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, nullable=False, unique=True, index=True)
    data = Column(JSON, nullable=False, default=list)  # serialized row list
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
