from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from backend.db_models import CharacterLevelORM, CharacterORM

# Identity keys produced by derive_character_identity -> CharacterORM columns.
IDENTITY_COLUMNS = {
    "race": "race",
    "background": "background",
    "class": "class_name",
}


def create_character(
    db: Session,
    name: str,
    player_name: Optional[str] = None,
    notes: Optional[str] = None,
) -> CharacterORM:
    character = CharacterORM(name=name, player_name=player_name, notes=notes)
    db.add(character)
    db.commit()
    db.refresh(character)
    return character


def get_character(db: Session, character_id: str) -> Optional[CharacterORM]:
    return db.get(CharacterORM, character_id)


def list_character_levels(db: Session, character_id: str) -> List[CharacterLevelORM]:
    return (
        db.query(CharacterLevelORM)
        .filter(CharacterLevelORM.character_id == character_id)
        .order_by(CharacterLevelORM.level)
        .all()
    )


def get_character_level(db: Session, character_id: str, level: int) -> Optional[CharacterLevelORM]:
    return (
        db.query(CharacterLevelORM)
        .filter(CharacterLevelORM.character_id == character_id, CharacterLevelORM.level == level)
        .one_or_none()
    )


def upsert_character_level(
    db: Session,
    character_id: str,
    level: int,
    sheet_path: Optional[str],
    extracted_data: Mapping[str, Any],
    sheet_filename: Optional[str] = None,
) -> Tuple[CharacterLevelORM, Optional[str]]:
    """Replace the row for (character, level) with a fresh upload.

    Returns the new row and the sheet path of the row it replaced (None when the
    level was new) so the caller can remove the superseded blob.
    """
    replaced_path: Optional[str] = None
    existing = get_character_level(db, character_id, level)
    if existing is not None:
        replaced_path = existing.sheet_path
        db.delete(existing)
        db.flush()

    row = CharacterLevelORM(
        character_id=character_id,
        level=level,
        sheet_path=sheet_path,
        sheet_filename=sheet_filename,
        extracted_data=dict(extracted_data),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row, replaced_path


def delete_character_level(db: Session, character_id: str, level: int) -> Optional[str]:
    """Delete one level. Returns its sheet path, or None when the level did not exist."""
    existing = get_character_level(db, character_id, level)
    if existing is None:
        return None
    sheet_path = existing.sheet_path or ""
    db.delete(existing)
    db.commit()
    return sheet_path


def populate_character_info(db: Session, character_id: str, identity: Mapping[str, str]) -> Dict[str, str]:
    """Copy race, background and class from an extracted sheet onto the character.

    Returns the columns that were updated; nothing is written when the identity is empty.
    """
    updates: Dict[str, str] = {}
    for key, column in IDENTITY_COLUMNS.items():
        value = identity.get(key)
        if isinstance(value, str) and value.strip():
            updates[column] = value.strip()
    if not updates:
        return updates

    character = get_character(db, character_id)
    if character is None:
        return {}
    for column, value in updates.items():
        setattr(character, column, value)
    db.commit()
    return updates
