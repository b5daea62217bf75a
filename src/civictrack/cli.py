"""CivicTrack CLI entry point"""

import argparse
import sys

import uvicorn

from civictrack.core.config import get_settings
from civictrack.core.logging import configure_logging


def init_project():
    """Initialize .civictrack directory, configuration and database"""
    from civictrack.storage.migrations import DATA_DIR, initialize_database

    initialize_database()
    print(f"Initialized civictrack in {DATA_DIR.absolute()}")


def serve(host: str = "127.0.0.1", port: int = 8080, reload: bool = False):
    """Start the civictrack server"""
    uvicorn.run(
        "civictrack.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=get_settings().log_level.lower(),
    )


def grant_admin(user_id: str) -> int:
    """Bind the admin role to an identity from the auth provider"""
    from civictrack.storage.migrations import initialize_database
    from civictrack.storage.role_service import role_service

    initialize_database()
    if role_service.grant_role(user_id):
        print(f"User {user_id} is now an admin")
    else:
        print(f"User {user_id} is already an admin")
    return 0


def revoke_admin(user_id: str) -> int:
    """Remove the admin role from an identity"""
    from civictrack.storage.migrations import initialize_database
    from civictrack.storage.role_service import role_service

    initialize_database()
    if role_service.revoke_role(user_id):
        print(f"User {user_id} is no longer an admin")
        return 0
    print(f"User {user_id} was not an admin", file=sys.stderr)
    return 1


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(description="CivicTrack - civic issue reporting backend")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Init command
    subparsers.add_parser("init", help="Initialize civictrack in current directory")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start civictrack server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Role commands
    grant_parser = subparsers.add_parser("grant-admin", help="Grant the admin role to a user id")
    grant_parser.add_argument("user_id", help="Identity id issued by the auth provider")
    revoke_parser = subparsers.add_parser("revoke-admin", help="Revoke the admin role from a user id")
    revoke_parser.add_argument("user_id", help="Identity id issued by the auth provider")

    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    if args.command == "init":
        init_project()
    elif args.command == "serve":
        serve(args.host, args.port, args.reload)
    elif args.command == "grant-admin":
        return grant_admin(args.user_id)
    elif args.command == "revoke-admin":
        return revoke_admin(args.user_id)
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
