"""FastAPI service for character sheets.

Characters are created by name; each level upload stores the sheet file, runs the
sheet_extraction pipeline over fillable PDFs, and keeps the extracted record next
to the level. Race, background and class found on the sheet are copied onto the
character.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from backend.blob_store import BlobNotFoundError, build_blob_store, build_character_sheet_key
from backend.character_store import (
    create_character,
    delete_character_level,
    get_character,
    get_character_level,
    list_character_levels,
    populate_character_info,
    upsert_character_level,
)
from backend.db import get_db, init_db
from backend.db_models import CharacterORM
from backend.schemas import (
    CharacterCreate,
    CharacterIdentity,
    CharacterLevelDetail,
    CharacterLevelListResponse,
    CharacterLevelRead,
    CharacterRead,
)
from sheet_extraction import (
    DocumentOpenError,
    derive_character_identity,
    parse_character_sheet,
    validate_extracted_data,
)

ROOT_DIR = Path(__file__).resolve().parents[1]

MIN_LEVEL = 1
MAX_LEVEL = 20
PDF_CONTENT_TYPE = "application/pdf"

logger = logging.getLogger("sheet-api")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))


def get_settings() -> Dict[str, Any]:
    allowed_raw = os.getenv("ALLOWED_ORIGINS", "*")
    allowed_list = [o.strip() for o in allowed_raw.split(",") if o.strip()]
    return {
        "allowed_origins": allowed_list,
        "blob_store_backend": os.getenv("BLOB_STORE_BACKEND", "local").lower(),
        "blob_store_dir": os.getenv("BLOB_STORE_DIR", str(ROOT_DIR / "sheet_store")),
        "s3_bucket": os.getenv("S3_BUCKET"),
        "s3_endpoint_url": os.getenv("S3_ENDPOINT_URL") or None,
        "aws_region": os.getenv("AWS_REGION", "us-east-1"),
        "max_upload_bytes": int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024))),
    }


settings = get_settings()
blob_store = build_blob_store(settings)

app = FastAPI(
    title="Character Sheet API",
    description="Stores character-sheet uploads per level and extracts their form fields.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings["allowed_origins"] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event() -> None:
    init_db()


def get_blob_store():
    return blob_store


def _require_character(db: Session, character_id: str) -> CharacterORM:
    character = get_character(db, character_id)
    if character is None:
        raise HTTPException(status_code=404, detail="Character not found")
    return character


def _parse_level(raw_level: Any) -> int:
    try:
        level = int(str(raw_level).strip())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid level (must be {MIN_LEVEL}-{MAX_LEVEL})") from exc
    if level < MIN_LEVEL or level > MAX_LEVEL:
        raise HTTPException(status_code=400, detail=f"Invalid level (must be {MIN_LEVEL}-{MAX_LEVEL})")
    return level


def _is_pdf_upload(file: UploadFile) -> bool:
    if (file.content_type or "").lower() == PDF_CONTENT_TYPE:
        return True
    return (file.filename or "").lower().endswith(".pdf")


def _extract_sheet(raw: bytes, filename: Optional[str]) -> Dict[str, Any]:
    """Run the extraction pipeline; an unreadable sheet yields an empty record."""
    try:
        return validate_extracted_data(parse_character_sheet(raw))
    except DocumentOpenError as exc:
        logger.warning("Could not open %s as a PDF, continuing with empty data: %s", filename, exc)
    except Exception:
        logger.warning("Sheet extraction failed for %s, continuing with empty data", filename, exc_info=True)
    return {}


def _discard_blob(store, key: Optional[str]) -> None:
    if not key:
        return
    try:
        store.delete(key)
    except BlobNotFoundError:
        logger.warning("Stored sheet %s was already gone", key)
    except Exception:
        logger.warning("Could not delete stored sheet %s", key, exc_info=True)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/characters", response_model=CharacterRead, status_code=201)
def create_character_endpoint(payload: CharacterCreate, db: Session = Depends(get_db)):
    character = create_character(
        db,
        name=payload.name.strip(),
        player_name=payload.player_name,
        notes=payload.notes,
    )
    logger.info("Created character %s (%s)", character.id, character.name)
    return CharacterRead.model_validate(character)


@app.get("/api/characters/{character_id}", response_model=CharacterRead)
def read_character(character_id: str, db: Session = Depends(get_db)):
    return CharacterRead.model_validate(_require_character(db, character_id))


@app.post("/api/characters/{character_id}/levels", response_model=CharacterLevelRead, status_code=201)
async def upload_character_level(
    character_id: str,
    file: UploadFile = File(...),
    level: str = Form(...),
    db: Session = Depends(get_db),
    store=Depends(get_blob_store),
):
    """
    Upload the sheet for one level of a character.

    Re-uploading an existing level replaces it and deletes the previous file.
    Sheets that cannot be parsed are still stored, with empty extracted data.
    """
    _require_character(db, character_id)
    level_num = _parse_level(level)

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file.")
    if len(raw) > settings["max_upload_bytes"]:
        raise HTTPException(status_code=413, detail="Uploaded sheet is too large.")

    key = build_character_sheet_key(character_id, level_num, file.filename)
    store.put(key, raw, content_type=file.content_type)

    extracted: Dict[str, Any] = {}
    if _is_pdf_upload(file):
        extracted = _extract_sheet(raw, file.filename)
        updated = populate_character_info(db, character_id, derive_character_identity(extracted))
        if updated:
            logger.info("Updated character %s from sheet: %s", character_id, sorted(updated))

    row, replaced_path = upsert_character_level(
        db,
        character_id=character_id,
        level=level_num,
        sheet_path=key,
        extracted_data=extracted,
        sheet_filename=file.filename,
    )
    if replaced_path and replaced_path != key:
        _discard_blob(store, replaced_path)

    logger.info(
        "Stored level %d for character %s (%d extracted attributes)",
        level_num,
        character_id,
        len(extracted),
    )
    return CharacterLevelRead.model_validate(row)


@app.get("/api/characters/{character_id}/levels", response_model=CharacterLevelListResponse)
def list_levels(character_id: str, db: Session = Depends(get_db)):
    _require_character(db, character_id)
    levels = list_character_levels(db, character_id)
    return CharacterLevelListResponse(
        character_id=character_id,
        levels=[CharacterLevelRead.model_validate(row) for row in levels],
    )


@app.get("/api/characters/{character_id}/levels/{level}", response_model=CharacterLevelDetail)
def read_character_level(character_id: str, level: int, db: Session = Depends(get_db)):
    level_num = _parse_level(level)
    character = _require_character(db, character_id)
    row = get_character_level(db, character_id, level_num)
    if row is None:
        raise HTTPException(status_code=404, detail="Character level not found")
    identity = CharacterIdentity(
        characterName=character.name,
        playerName=character.player_name,
        race=character.race,
        class_=character.class_name,
        background=character.background,
    )
    return CharacterLevelDetail(character=identity, level=row.level, extractedData=row.extracted_data or {})


@app.get("/api/characters/{character_id}/levels/{level}/pdf")
def download_character_sheet(
    character_id: str,
    level: int,
    db: Session = Depends(get_db),
    store=Depends(get_blob_store),
):
    level_num = _parse_level(level)
    _require_character(db, character_id)
    row = get_character_level(db, character_id, level_num)
    if row is None or not row.sheet_path:
        raise HTTPException(status_code=404, detail="Character sheet not found")
    try:
        content = store.get(row.sheet_path)
    except BlobNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Character sheet not found") from exc
    # Stored keys end in "<timestamp>-<sanitized filename>", which is header-safe.
    filename = Path(row.sheet_path).name.split("-", 1)[-1]
    return Response(
        content=content,
        media_type=PDF_CONTENT_TYPE,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@app.delete("/api/characters/{character_id}/levels/{level}", status_code=204)
def delete_level(
    character_id: str,
    level: int,
    db: Session = Depends(get_db),
    store=Depends(get_blob_store),
):
    level_num = _parse_level(level)
    _require_character(db, character_id)
    sheet_path = delete_character_level(db, character_id, level_num)
    if sheet_path is None:
        raise HTTPException(status_code=404, detail="Character level not found")
    _discard_blob(store, sheet_path)
    logger.info("Deleted level %d for character %s", level_num, character_id)
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.app:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
