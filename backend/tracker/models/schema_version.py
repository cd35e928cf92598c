from sqlalchemy import Column, Integer, DateTime, func
from ..database import Base


class SchemaVersion(Base):
    """Schema version applied by the migration runner"""
    __tablename__ = "schema_version"

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<SchemaVersion {self.version}>"
