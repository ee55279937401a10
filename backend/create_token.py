"""
Print a bearer token for the MangaBot API.

Usage:
    python create_token.py ana@example.com --days 30

The token is signed with SECRET_KEY from the environment / .env, so run it
with the same configuration as the server.
"""

import argparse

from mangabot.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a MangaBot API access token")
    parser.add_argument("subject", help="Caller identity stored in the `sub` claim")
    parser.add_argument("--days", type=int, default=None,
                        help="Lifetime in days (default: ACCESS_TOKEN_EXPIRE_MINUTES)")
    args = parser.parse_args()

    expires = args.days * 24 * 60 * 60 if args.days else None
    print(create_access_token({"sub": args.subject}, expires_delta=expires))


if __name__ == "__main__":
    main()
