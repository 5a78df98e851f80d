"""Backup export and import commands."""

from datetime import date
from pathlib import Path

import click
from zenledger.cli.error_handling import handle_domain_error
from zenledger.domain.backup import BackupService
from zenledger.domain.entities import SettingKey
from zenledger.domain.errors import DomainError
from zenledger.domain.settings import SettingsService


def default_backup_name(today: date | None = None) -> str:
    """File name used when exporting without an explicit path."""
    return f"zenledger-backup-{(today or date.today()).isoformat()}.json"


@click.group()
def backup_group():
    """Export and restore the whole ledger as JSON."""
    pass


@backup_group.command("export")
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.pass_context
def export_backup(ctx, file: str | None):
    """Write a JSON backup.

    Without FILE the backup goes to the configured backup folder (see
    'backup set-folder') or the current directory, named by today's date.
    Use '-' to write to standard output.
    """
    db = ctx.obj["db"]
    document = BackupService(db).export_json()

    if file == "-":
        click.echo(document)
        return

    if file is None:
        folder = SettingsService(db).get(SettingKey.FOLDER_HANDLE, ".")
        path = Path(folder) / default_backup_name()
    else:
        path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
    click.echo(f"Backup written to {path}")


@backup_group.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_backup(ctx, file: str, yes: bool):
    """Replace all ledger data with a JSON backup.

    Everything currently stored is deleted first. If the backup is invalid
    nothing is changed.
    """
    if not yes:
        click.confirm("This will replace ALL existing data. Continue?", abort=True)

    db = ctx.obj["db"]
    try:
        counts = BackupService(db).import_json(Path(file).read_text(encoding="utf-8"))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    summary = ", ".join(f"{count} {name}" for name, count in counts.items())
    click.echo(f"Imported {summary}")


@backup_group.command("set-folder")
@click.argument("folder", type=click.Path(file_okay=False))
@click.pass_context
def set_folder(ctx, folder: str):
    """Remember the folder exports go to by default."""
    SettingsService(ctx.obj["db"]).set(SettingKey.FOLDER_HANDLE, str(Path(folder).expanduser()))
    click.echo(f"Backup folder set to {folder}")


def register_commands(cli):
    """Register backup commands with CLI."""
    cli.add_command(backup_group, name="backup")
