"""Create a local portal account.

Usage:
  python -m scripts.create_user --username admin --password secret [--email a@b.c] [--name Admin]
Or provide via env: PORTAL_USERNAME, PORTAL_PASSWORD
"""
import argparse
import os
from getpass import getpass

from app.crud.errors import DuplicateError
from app.crud.users import create_user, username_exists
from app.db.session import SessionLocal
from app.schemas.users import UserCreate


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--username")
    parser.add_argument("--password")
    parser.add_argument("--email")
    parser.add_argument("--name")
    args = parser.parse_args()

    username = args.username or os.getenv("PORTAL_USERNAME")
    password = args.password or os.getenv("PORTAL_PASSWORD")
    if not username:
        username = input("Username: ").strip()
    if not password:
        password = getpass("Password: ")

    data = UserCreate(username=username, password=password, email=args.email, name=args.name)

    db = SessionLocal()
    try:
        if username_exists(db, data.username):
            print("User already exists:", data.username)
            return
        try:
            user = create_user(db, data)
        except DuplicateError as e:
            print(str(e))
            return
        print(f"Created user {user.username} (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
