from sqlalchemy import Column, DateTime, Float, Integer, String

from app.core.database import Base


class Owner(Base):
    __tablename__ = "owners"
    # AUTOINCREMENT keeps SQLite from reusing the sequence of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=True, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    ownership_percentage = Column(Float, nullable=False)
    role = Column(String(32), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
