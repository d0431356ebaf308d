"""Operator commands for the wedding site."""

import asyncio
from uuid import UUID

import typer
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from src.config.database import async_session_manager
from src.config.settings import settings
from src.errors import StoreError
from src.guest_messages.repository.orm_models import GuestMessage
from src.guest_messages.repository.read_models import SqlGuestMessageReadModel
from src.guest_messages.repository.write_models import SqlGuestMessageWriteModel
from src.notifications import TelegramNotifier
from src.rsvp.repository.orm_models import RSVPSubmission

app = typer.Typer(help="CLI commands for the wedding site")

PLACEHOLDER_MARKERS = ("your-", "example", "changeme")


def find_env_problems(values: dict[str, str]) -> dict[str, str]:
    """Names of settings that are unset or still look like placeholders, with the reason."""
    problems: dict[str, str] = {}
    for name, value in values.items():
        if not value:
            problems[name] = "not set"
        elif any(marker in value for marker in PLACEHOLDER_MARKERS):
            problems[name] = "set but appears to be a placeholder"
    return problems


@app.command()
def check_env():
    """Verify that the settings the site needs are present."""
    values = {
        "DATABASE_URL": settings.database_url,
        "TELEGRAM_BOT_TOKEN": settings.telegram_bot_token,
        "TELEGRAM_CHAT_ID": settings.telegram_chat_id,
    }
    problems = find_env_problems(values)

    for name, value in values.items():
        if name in problems:
            typer.secho(f"{name}: {problems[name]}", fg=typer.colors.RED)
        else:
            typer.secho(f"{name}: set ({value[:20]}...)", fg=typer.colors.GREEN)

    if problems:
        typer.echo()
        typer.secho("Some settings are missing or invalid.", fg=typer.colors.RED)
        typer.secho("Add them to .env in the project root.", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho("All required settings are present.", fg=typer.colors.GREEN)


async def _probe_tables() -> dict[str, int]:
    """Count rows in both tables and try an insert into each, rolling everything back."""
    counts: dict[str, int] = {}
    async with async_session_manager(auto_commit=False) as session:
        for model in (RSVPSubmission, GuestMessage):
            result = await session.execute(select(func.count()).select_from(model))
            counts[model.__tablename__] = result.scalar_one()

        session.add(
            RSVPSubmission(
                name="Test User",
                email="test@wedding.invalid",
                attending=True,
                guests=2,
                message="This is a test submission",
            )
        )
        session.add(GuestMessage(name="Test Guest", message="This is a test message", approved=False))
        await session.flush()
        await session.rollback()
    return counts


@app.command()
def check_db():
    """Check that both tables exist and accept inserts. Nothing is kept."""
    try:
        counts = asyncio.run(_probe_tables())
    except SQLAlchemyError as e:
        typer.secho(f"Database check failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    for table, count in counts.items():
        typer.secho(f"{table}: reachable, {count} rows, insert ok", fg=typer.colors.GREEN)


@app.command()
def list_pending():
    """List guest messages waiting for approval, oldest first."""
    try:
        messages = asyncio.run(SqlGuestMessageReadModel().list_pending())
    except StoreError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if not messages:
        typer.secho("No messages waiting for approval.", fg=typer.colors.GREEN)
        return

    for message in messages:
        typer.secho(f"{message.id}  {message.created_at:%Y-%m-%d %H:%M}  {message.name}", fg=typer.colors.CYAN)
        typer.echo(f"    {message.message}")


@app.command()
def approve_message(
    message_id: str = typer.Argument(
        ...,
        help="Guest message UUID",
    ),
):
    """Approve a guest message so it shows up on the site."""
    try:
        approved = asyncio.run(SqlGuestMessageWriteModel().approve_message(UUID(message_id)))
    except (ValueError, StoreError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if approved is None:
        typer.secho(f"Guest message not found: {message_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Message approved!", fg=typer.colors.GREEN)
    typer.secho(f"  From: {approved.name}", fg=typer.colors.BLUE)
    typer.secho(
        f"  It appears publicly within {settings.guest_messages_revalidate} seconds.",
        fg=typer.colors.YELLOW,
    )


@app.command()
def send_test_notification(
    name: str = typer.Option(
        "Test Guest",
        "--name",
        "-n",
        help="Guest name shown in the notification",
    ),
    message: str = typer.Option(
        "This is a test message",
        "--message",
        "-m",
        help="Message text",
    ),
):
    """Send a guest message notification to the configured Telegram chat."""
    result = asyncio.run(TelegramNotifier(config=settings)(name, message))

    if not result.success:
        typer.secho(f"Notification failed: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Notification sent!", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
