#!/usr/bin/env python3
"""
Point d'entree en ligne de commande du back-office.

Usage:
------
    python3 run.py api --port 8000      # API REST (uvicorn)
    python3 run.py worker               # Timer des backups (scheduler.py)
    python3 run.py backup               # Backup manuel immediat
    python3 run.py sweep                # Retention immediate
    python3 run.py token --subject admin  # Access token admin (developpement)

Codes de sortie:
----------------
- 0: succes
- 1: echec (message sur stderr, details dans les logs)
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

from pos_backoffice.application.use_cases.run_backup import RunBackupRequest  # noqa: E402
from pos_backoffice.domain.entities.backup_artifact import BackupTrigger  # noqa: E402
from pos_backoffice.domain.exceptions import DomainException  # noqa: E402
from pos_backoffice.infrastructure.backup.config import get_backup_config  # noqa: E402
from pos_backoffice.infrastructure.container import Container  # noqa: E402
from pos_backoffice.infrastructure.logging import configure_logging_from_env  # noqa: E402


def cmd_api(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "pos_backoffice.presentation.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def cmd_worker(args: argparse.Namespace) -> int:
    from scheduler import main as worker_main

    return worker_main()


def cmd_backup(args: argparse.Namespace) -> int:
    container = Container.create(get_backup_config())
    try:
        response = container.run_backup.execute(RunBackupRequest(BackupTrigger.MANUAL))
    finally:
        container.db.dispose()

    artifact = response.artifact
    print(f"{artifact.filename} ({artifact.size_bytes} octets)")
    return 0


def cmd_sweep(args: argparse.Namespace) -> int:
    container = Container.create(get_backup_config())
    try:
        response = container.backup_schedule.sweep_expired()
    finally:
        container.db.dispose()

    print(f"{len(response.deleted)} supprime(s), {response.kept} conserve(s) "
          f"(retention {response.retention_days} jours)")
    for filename in response.deleted:
        print(f"  - {filename}")
    return 0


def cmd_token(args: argparse.Namespace) -> int:
    from datetime import timedelta

    from pos_backoffice.presentation.api.auth.jwt_service import JWTService
    from pos_backoffice.presentation.api.config import get_settings

    service = JWTService(get_settings())
    print(service.create_access_token(
        args.subject,
        role=args.role,
        expires_in=timedelta(minutes=args.minutes) if args.minutes else None,
    ))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run.py", description="POS back-office: backups et maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    api = sub.add_parser("api", help="Lancer l'API REST")
    api.add_argument("--host", default="0.0.0.0")
    api.add_argument("--port", type=int, default=8000)
    api.add_argument("--reload", action="store_true")
    api.set_defaults(handler=cmd_api)

    sub.add_parser("worker", help="Lancer le timer des backups").set_defaults(handler=cmd_worker)
    sub.add_parser("backup", help="Backup manuel immediat").set_defaults(handler=cmd_backup)
    sub.add_parser("sweep", help="Supprimer les backups expires").set_defaults(handler=cmd_sweep)

    token = sub.add_parser("token", help="Emettre un access token")
    token.add_argument("--subject", default="admin")
    token.add_argument("--role", default="admin")
    token.add_argument("--minutes", type=int, default=None)
    token.set_defaults(handler=cmd_token)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Lance la sous-commande demandee"""
    args = build_parser().parse_args(argv)
    configure_logging_from_env()

    try:
        return args.handler(args)
    except DomainException as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nArrete.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
