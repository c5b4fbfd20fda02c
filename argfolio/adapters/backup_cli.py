"""CLI adapter to export and import JSON backups."""

import argparse
from pathlib import Path

from argfolio.application.use_cases.backup import (
    ExportBackupUseCase,
    ImportBackupUseCase,
)
from argfolio.domain.errors import BackupFormatError
from argfolio.infrastructure.container import (
    build_accounts_repository,
    build_backup_store,
    build_database_adapter,
    build_instruments_repository,
    build_movements_repository,
)
from argfolio.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the backup command."""
    parser = argparse.ArgumentParser(
        description="Export or import a portfolio backup"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write a backup")
    export_parser.add_argument(
        "--output",
        default=None,
        help="Destination file (prints to stdout when omitted)",
    )

    import_parser = subparsers.add_parser("import", help="Restore a backup")
    import_parser.add_argument("path", help="Backup file to import")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the export or import use case."""
    args = build_parser().parse_args(argv)
    get_usage_logger().info(f"argfolio-backup {args.command}")

    logger = get_app_logger()
    db_adapter = build_database_adapter()
    if args.command == "export":
        payload = ExportBackupUseCase(
            accounts_repository=build_accounts_repository(db_adapter),
            instruments_repository=build_instruments_repository(db_adapter),
            movements_repository=build_movements_repository(db_adapter),
            logger=logger,
        ).execute()
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"Backup written to {args.output}")
        else:
            print(payload)
        return

    raw_json = Path(args.path).read_text(encoding="utf-8")
    try:
        result = ImportBackupUseCase(
            backup_store=build_backup_store(db_adapter),
            logger=logger,
        ).execute(raw_json)
    except BackupFormatError as exc:
        logger.error(f"Backup import failed: {exc}")
        raise SystemExit(f"Invalid backup: {exc}") from exc
    print(
        f"Imported {result.accounts} accounts, {result.instruments} "
        f"instruments and {result.movements} movements "
        f"({len(result.rejected)} rejected)."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
