"""Mint a bearer token for a principal.

The token is signed with ``SECRET_KEY`` from the environment, so run
this with the same environment as the server::

    SECRET_KEY=... python create_token.py alice --days 365
"""
import argparse

from contact_book_api.app.core.security import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an access token for the Contact Book API")
    parser.add_argument("principal", help="identity to embed as the token subject")
    parser.add_argument("--days", type=int, default=365, help="token lifetime in days (default: 365)")
    args = parser.parse_args()
    print(create_access_token({"sub": args.principal}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
