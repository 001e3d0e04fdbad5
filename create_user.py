"""
Create a login user from the command line

Run:  python create_user.py owner@example.com 'a long password'
"""
import sys

from walletbook.auth import create_user, get_user_by_email
from walletbook.infrastructure.db.session import session_scope

if len(sys.argv) != 3:
    print(__doc__.strip())
    sys.exit(2)

email, password = sys.argv[1], sys.argv[2]

with session_scope() as db:
    existing = get_user_by_email(db, email)
    if existing:
        print(f"User already exists: {existing.email} (ID: {existing.id})")
    else:
        user = create_user(db, email, password)
        print(f"Created user: {user.email} (ID: {user.id})")
