"""CLI tool for admin operations.

Usage:
    python -m journal.cli create-user
"""

import sys
import getpass

from sqlmodel import Session, select

from journal.database import engine, create_db_and_tables
from journal.models.user import User
from journal.services.auth import hash_password


def create_user():
    """Create a journal login interactively."""
    create_db_and_tables()

    username = input("Username: ").strip().lower()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)
    if len(password) < 8:
        print("Password must be at least 8 characters.")
        sys.exit(1)

    user = User(username=username, hashed_password=hash_password(password))
    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{username}' created. Set an initial balance under /api/profile before adding positions.")


COMMANDS = {
    "create-user": create_user,
}


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    command = COMMANDS.get(sys.argv[1])
    if command is None:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
    command()


if __name__ == "__main__":
    main()
