from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.numbering.catalog import IT_ASSET_CATEGORIES, IT_ASSET_CONFIG
from app.models.it_asset import ItAsset
from app.services.document_numbering import format_serial, parse_serial


def category_code(kategori: str | None) -> str:
    return IT_ASSET_CATEGORIES.get((kategori or "").strip(), "")


def asset_number_prefix(kategori: str | None, received_on: date | datetime | str) -> str:
    """
    'Laptop', 2025-03-14 -> 'LMA.1B/IT-NB/03.25/'.
    Unknown categories yield an empty prefix.
    """
    code = category_code(kategori)
    if not code:
        return ""
    if isinstance(received_on, str):
        received_on = date.fromisoformat(received_on[:10])
    return f"{IT_ASSET_CONFIG['template_prefix']}-{code}/{received_on:%m}.{received_on:%y}/"


def next_asset_number(db: Session, kategori: str) -> str:
    """
    Next three-digit suffix for a category, counted across all months.
    """
    stmt = select(ItAsset.nomor_asset).where(ItAsset.kategori == kategori)
    numbers = []
    for nomor in db.execute(stmt).scalars().all():
        if not nomor or not nomor.startswith(IT_ASSET_CONFIG["template_prefix"]):
            continue
        parsed = parse_serial(nomor.rsplit("/", 1)[-1])
        if parsed is not None:
            numbers.append(parsed)

    next_number = max(numbers) + 1 if numbers else 1
    return format_serial(next_number, IT_ASSET_CONFIG["serial_width"])
