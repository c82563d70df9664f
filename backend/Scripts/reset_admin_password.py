"""
Rotate an admin password (or create the admin if the email is new).

    python Scripts/reset_admin_password.py --email admin@tournament.com --password '...'
"""
import argparse

from portal.core.roles import KIND_ADMIN
from portal.crud import crud_credentials
from portal.db.init_db import init_db
from portal.db.session import SessionLocal

MIN_LENGTH = 8


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    args = ap.parse_args()

    if len(args.password) < MIN_LENGTH:
        raise SystemExit(f"Password must be at least {MIN_LENGTH} characters")

    init_db()
    db = SessionLocal()
    try:
        admin = crud_credentials.find_by_email(db, KIND_ADMIN, args.email)
        if admin:
            crud_credentials.set_password(db, admin, args.password)
            action = "rotated"
        else:
            crud_credentials.create(db, KIND_ADMIN, args.password, email=args.email)
            action = "created"
        db.commit()
        print(f"OK: admin {crud_credentials.normalize_email(args.email)} {action}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
