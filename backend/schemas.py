from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CharacterCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    player_name: Optional[str] = None
    notes: Optional[str] = None


class CharacterLevelRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    character_id: str
    level: int
    sheet_path: Optional[str] = None
    sheet_filename: Optional[str] = None
    extracted_data: Dict[str, Any] = Field(default_factory=dict)
    uploaded_at: datetime
    updated_at: datetime


class CharacterLevelSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    level: int
    sheet_filename: Optional[str] = None
    uploaded_at: datetime


class CharacterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    player_name: Optional[str] = None
    race: Optional[str] = None
    class_name: Optional[str] = None
    background: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    levels: List[CharacterLevelSummary] = Field(default_factory=list)


class CharacterLevelListResponse(BaseModel):
    character_id: str
    levels: List[CharacterLevelRead]


class CharacterIdentity(BaseModel):
    characterName: str
    playerName: Optional[str] = None
    race: Optional[str] = None
    class_: Optional[str] = Field(default=None, alias="class")
    background: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CharacterLevelDetail(BaseModel):
    """Level view combining the character's identity with the extracted sheet data."""

    character: CharacterIdentity
    level: int
    extractedData: Dict[str, Any] = Field(default_factory=dict)
