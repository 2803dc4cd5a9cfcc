"""
scripts/create_user.py

Create an account from the command line (e.g. the first Owner on a fresh
database):

    python -m scripts.create_user

You will be prompted for name, email, mobile, password and role.
"""

import sys
import os

# Make sure app is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError as SchemaValidationError

from app.core.database import SessionLocal, init_db
from app.core.exceptions import AppError
from app.schemas.user import UserCreate
from app.services.accounts import AccountService


def create_user():
    print("\n── Create RoomKart User ──────────────────")

    name     = input("Name:                 ").strip()
    email    = input("Email:                ").strip()
    mobile   = input("Mobile (10 digits):   ").strip()
    password = input("Password:             ").strip()
    role     = input("Role [Owner/Tenant]:  ").strip() or "Owner"

    try:
        data = UserCreate(name=name, email=email, mobile=mobile, password=password, role=role)
    except SchemaValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}")
        sys.exit(1)

    init_db()
    db = SessionLocal()
    try:
        user = AccountService(db).register(data)
        print("\nUser created.")
        print(f"   ID:     {user.id}")
        print(f"   Name:   {user.name}")
        print(f"   Mobile: {user.mobile}")
        print(f"   Role:   {user.role.value}\n")
    except AppError as e:
        print(f"Failed: {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_user()
