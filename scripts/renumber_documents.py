"""Recompute docon document numbers from their key columns.

Rows created before the serial was part of the printed number still carry
the short form, and older location/work system spellings ('5', '011') are
rewritten to '05' / '11'. Dry-run by default; pass --apply to write the changes.

Usage:
  python -m scripts.renumber_documents [--apply]
"""
import argparse

from app.db.session import SessionLocal
from app.models.docon import DoconDocument
from app.services.document_numbering import DocumentKey, build_document_number


def _expected_parts(doc: DoconDocument) -> tuple[DocumentKey, str] | None:
    key = DocumentKey.from_document(doc).canonical()
    try:
        return key, build_document_number(key, doc.serial_number, doc.revision_number)
    except ValueError:
        return None


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="write the new numbers")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        changed = 0
        skipped = 0
        for doc in db.query(DoconDocument).order_by(DoconDocument.id).all():
            expected_parts = _expected_parts(doc)
            if expected_parts is None:
                skipped += 1
                print(f"skip id={doc.id}: non-numeric location/work system")
                continue
            key, expected = expected_parts
            if (expected, key.location, key.work_system) == (
                doc.document_number,
                doc.location,
                doc.work_system,
            ):
                continue
            print(f"id={doc.id}: {doc.document_number} -> {expected}")
            doc.location = key.location
            doc.work_system = key.work_system
            doc.document_number = expected
            changed += 1

        if args.apply:
            db.commit()
            print(f"Updated {changed} documents ({skipped} skipped).")
        else:
            db.rollback()
            print(f"Dry run: {changed} documents would change ({skipped} skipped).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
