# scripts/dev_jwt_token.py
"""Print a long-lived bearer token for poking the moderation API locally."""
import sys
from datetime import timedelta

from app.shared.utils.security import create_access_token


def main():
    user_id = sys.argv[1] if len(sys.argv) > 1 else "local-moderator"
    roles = sys.argv[2].split(",") if len(sys.argv) > 2 else ["MODERATOR"]
    print(create_access_token(user_id, roles, timedelta(days=30)))


if __name__ == "__main__":
    main()
