import json

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from .errors import ImageNotFoundError
from .services.image_service import get_image_store
from .services.schema_service import migrate_schema


images_cli = AppGroup("images", help="Inspect and edit image metadata records.")


def _echo_image(image):
    click.echo(json.dumps(image.to_dict(), indent=2))


@images_cli.command("create")
@click.argument("filename")
@click.argument("filepath")
def create_image(filename, filepath):
    _echo_image(get_image_store().create(filename, filepath))


@images_cli.command("show")
@click.argument("image_id", type=int)
@click.option("--include-deleted", is_flag=True, help="Also return soft-deleted records.")
def show_image(image_id, include_deleted):
    try:
        image = get_image_store().get(image_id, include_deleted=include_deleted)
    except ImageNotFoundError as exc:
        raise click.ClickException(str(exc))
    _echo_image(image)


@images_cli.command("update")
@click.argument("image_id", type=int)
@click.option("--filename", default=None)
@click.option("--filepath", default=None)
def update_image(image_id, filename, filepath):
    try:
        image = get_image_store().update(image_id, filename=filename, filepath=filepath)
    except ImageNotFoundError as exc:
        raise click.ClickException(str(exc))
    _echo_image(image)


@images_cli.command("delete")
@click.argument("image_id", type=int)
def delete_image(image_id):
    try:
        get_image_store().soft_delete(image_id)
    except ImageNotFoundError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"image {image_id} deleted")


@click.command("migrate-schema")
@with_appcontext
def migrate_schema_command():
    """Create missing tables and columns for the image models."""
    added = migrate_schema(current_app._get_current_object())
    click.echo("added: " + ", ".join(added) if added else "schema up to date")


def register_commands(app):
    app.cli.add_command(images_cli)
    app.cli.add_command(migrate_schema_command)
