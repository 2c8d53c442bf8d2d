from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from backend.db import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class CharacterORM(Base):
    __tablename__ = "characters"

    id = Column(String, primary_key=True, default=_uuid_str)
    name = Column(String, nullable=False)
    player_name = Column(String, nullable=True)
    race = Column(String, nullable=True)
    class_name = Column(String, nullable=True)
    background = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    levels = relationship(
        "CharacterLevelORM",
        back_populates="character",
        cascade="all, delete-orphan",
        order_by="CharacterLevelORM.level",
    )


JSONType = JSON


class CharacterLevelORM(Base):
    """One uploaded sheet per character level; re-uploading a level replaces the row."""

    __tablename__ = "character_levels"
    __table_args__ = (UniqueConstraint("character_id", "level", name="uq_character_level"),)

    id = Column(String, primary_key=True, default=_uuid_str)
    character_id = Column(String, ForeignKey("characters.id"), nullable=False, index=True)
    level = Column(Integer, nullable=False)
    sheet_path = Column(String, nullable=True)
    sheet_filename = Column(String, nullable=True)
    extracted_data = Column(JSONType, nullable=False, default=dict)

    uploaded_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    character = relationship("CharacterORM", back_populates="levels")
