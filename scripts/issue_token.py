"""Issue an access token for local testing, e.g. ``python scripts/issue_token.py seller <uuid>``."""
import argparse

from dotenv import load_dotenv

load_dotenv()

from storefront.core.security import ROLES, Identity, create_access_token  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("role", choices=ROLES)
    parser.add_argument("subject")
    parser.add_argument("--email", default=None)
    parser.add_argument("--ttl", type=int, default=None, help="Lifetime in minutes")
    args = parser.parse_args()

    identity = Identity(id=args.subject, role=args.role, email=args.email)
    print(create_access_token(identity, ttl_minutes=args.ttl))


if __name__ == "__main__":
    main()
