"""CLI commands for wedding RSVP management."""

import asyncio
import datetime as dt
from uuid import UUID

import typer

from src.communications import get_message_dispatcher
from src.config.database import async_session_manager
from src.config.settings import settings
from src.guests.completion import calculate_progress
from src.guests.dtos import DuplicatePolicy, GuestRecordDTO, GuestSide
from src.guests.errors import RSVPError
from src.guests.features.create_guest.write_model import SqlGuestCreateWriteModel
from src.guests.features.rsvp_token.write_model import SqlRSVPTokenWriteModel
from src.guests.repository.read_models import SqlGuestReadModel
from src.models.event import Ceremony, Event

app = typer.Typer(help="CLI commands for wedding RSVP management")


def _parse_date(value: str | None) -> dt.date | None:
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected a date like 2026-08-15, got {value!r}")


@app.command()
def create_event(
    name: str = typer.Argument(..., help="Name of the event"),
    start_date: str = typer.Argument(..., help="Wedding date, YYYY-MM-DD"),
    couple_names: str = typer.Option("", "--couple", "-c", help="Names shown in invitations"),
    location: str = typer.Option("", "--location", "-l", help="Venue"),
    rsvp_deadline: str = typer.Option(None, "--deadline", "-d", help="RSVP deadline, YYYY-MM-DD"),
    no_plus_ones: bool = typer.Option(False, "--no-plus-ones", help="Disallow plus-ones"),
    ceremonies: list[str] = typer.Option(
        [],
        "--ceremony",
        help="Ceremony as 'name;YYYY-MM-DD;HH:MM;HH:MM;location', may be repeated",
    ),
):
    """Create an event with its ceremonies."""
    event_date = _parse_date(start_date)
    deadline = _parse_date(rsvp_deadline)

    parsed_ceremonies = []
    for raw in ceremonies:
        parts = [part.strip() for part in raw.split(";")]
        if len(parts) != 5:
            raise typer.BadParameter(f"Ceremony needs 5 ';'-separated parts: {raw!r}")
        ceremony_name, ceremony_date, start_time, end_time, ceremony_location = parts
        parsed_ceremonies.append(
            (ceremony_name, _parse_date(ceremony_date), start_time, end_time, ceremony_location)
        )

    async def _create_event():
        async with async_session_manager() as session:
            event = Event(
                name=name,
                couple_names=couple_names,
                start_date=event_date,
                location=location,
                rsvp_deadline=deadline,
                allow_plus_ones=not no_plus_ones,
            )
            session.add(event)
            await session.flush()  # Get the UUID

            for ceremony_name, ceremony_date, start_time, end_time, ceremony_location in parsed_ceremonies:
                session.add(
                    Ceremony(
                        event_id=event.uuid,
                        name=ceremony_name,
                        date=ceremony_date,
                        start_time=start_time,
                        end_time=end_time,
                        location=ceremony_location,
                    )
                )
            return event.uuid

    event_id = asyncio.run(_create_event())

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event_id}", fg=typer.colors.CYAN)
    typer.secho(f"  Ceremonies: {len(parsed_ceremonies)}", fg=typer.colors.BLUE)


@app.command()
def create_guest(
    event_id: str = typer.Argument(..., help="Event UUID"),
    first_name: str = typer.Argument(..., help="First name of the guest"),
    last_name: str = typer.Argument(..., help="Last name of the guest"),
    email: str = typer.Option(None, "--email", "-e", help="Email address"),
    side: GuestSide = typer.Option(GuestSide.BRIDE, "--side", "-s", help="bride or groom"),
    plus_one: bool = typer.Option(False, "--plus-one", help="Allow a plus-one"),
    local: bool = typer.Option(False, "--local", help="Guest lives near the venue"),
    send_invitation: bool = typer.Option(False, "--send", help="Send the invitation email"),
):
    """Create a guest and print their RSVP link."""
    async def _create_guest():
        write_model = SqlGuestCreateWriteModel(message_dispatcher=get_message_dispatcher())
        return await write_model.create_guest(
            UUID(event_id),
            GuestRecordDTO(
                first_name=first_name,
                last_name=last_name,
                email=email,
                side=side,
                plus_one_allowed=plus_one,
                is_local_guest=local,
            ),
            on_duplicate=DuplicatePolicy.REJECT,
            send_invitation=send_invitation,
        )

    try:
        guest = asyncio.run(_create_guest())
    except RSVPError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest created successfully!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  RSVP URL: {settings.build_rsvp_link(guest.rsvp_token)}", fg=typer.colors.CYAN)


@app.command()
def reissue_token(
    guest_id: str = typer.Argument(..., help="Guest UUID"),
):
    """Replace a guest's RSVP token; the old link stops working."""
    try:
        rsvp = asyncio.run(SqlRSVPTokenWriteModel().issue_token(UUID(guest_id)))
    except RSVPError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("New RSVP token issued!", fg=typer.colors.GREEN)
    typer.secho(f"  RSVP URL: {rsvp.link}", fg=typer.colors.CYAN)


@app.command()
def progress(
    guest_id: str = typer.Argument(..., help="Guest UUID"),
):
    """Show how far a guest got through the RSVP."""
    try:
        guest = asyncio.run(SqlGuestReadModel().get_guest(UUID(guest_id)))
    except RSVPError as e:
        typer.secho(e.message, fg=typer.colors.RED)
        raise typer.Exit(1)

    result = calculate_progress(guest)
    typer.secho(f"{guest.full_name}", fg=typer.colors.GREEN)
    typer.secho(f"  Status: {guest.rsvp_status.value} ({guest.rsvp_stage.value})", fg=typer.colors.BLUE)
    typer.secho(f"  Stage 1: {result.stage1}%", fg=typer.colors.CYAN)
    typer.secho(f"  Stage 2: {result.stage2}%", fg=typer.colors.CYAN)
    typer.secho(f"  Overall: {result.overall}%", fg=typer.colors.MAGENTA)


if __name__ == "__main__":
    app()
