import asyncio
import logging
from typing import Optional

import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.table import Table

from escape_booking.client.escape_booking import EscapeBooking
from escape_booking.domains import BookingError

# --- Basic Logging Configuration ---
logging.basicConfig(level=logging.WARNING, format="%(levelname)s:%(name)s:%(message)s")

app = typer.Typer()
console = Console()

ConfigOption = Annotated[
    str, typer.Option(help="Path to the configuration JSON file.")
]


def load_client(config: str) -> EscapeBooking:
    """Create the client, printing a readable error on failure."""
    try:
        return EscapeBooking(config_path=config)
    except FileNotFoundError:
        console.print(
            f"[bold red]Error:[/bold red] Configuration file not found at '{config}'"
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[bold red]Error loading configuration:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def rooms(config: ConfigOption = "config.json"):
    """List active rooms."""
    client = load_client(config)
    try:
        active_rooms = asyncio.run(client.list_rooms())
    finally:
        client.close()

    table = Table("ID", "Name", "Duration", "Players", "Linked")
    for room in active_rooms:
        table.add_row(
            room.id,
            room.name,
            f"{room.duration_minutes} min",
            f"{room.capacity_min}-{room.capacity_max}",
            ", ".join(room.linked_room_ids),
        )
    console.print(table)


@app.command()
def slots(
    room_id: Annotated[str, typer.Argument(help="Room ID.")],
    date: Annotated[str, typer.Argument(help="Date as YYYY-MM-DD.")],
    config: ConfigOption = "config.json",
    free_only: Annotated[
        bool, typer.Option("--free-only", help="Hide start times already booked.")
    ] = False,
):
    """Show the start times a room offers on a date."""
    client = load_client(config)
    try:
        if free_only:
            times = asyncio.run(client.get_availability(room_id, date))
        else:
            times = asyncio.run(client.get_start_times(room_id, date))
    except BookingError as e:
        console.print(f"[bold red]Error:[/bold red] {e.message}")
        raise typer.Exit(code=1)
    finally:
        client.close()

    if not times:
        console.print(f"[yellow]No sessions on {date}.[/yellow]")
        return
    console.print(" ".join(times))


@app.command()
def book(
    room_id: Annotated[str, typer.Argument(help="Room ID.")],
    date: Annotated[str, typer.Argument(help="Date as YYYY-MM-DD.")],
    start: Annotated[str, typer.Argument(help="Start time as HH:MM.")],
    players: Annotated[int, typer.Argument(help="Party size.")],
    email: Annotated[
        Optional[str], typer.Option(help="Customer email.")
    ] = None,
    name: Annotated[Optional[str], typer.Option(help="Customer name.")] = None,
    config: ConfigOption = "config.json",
):
    """Book a session."""
    client = load_client(config)
    try:
        result = asyncio.run(
            client.create_booking(
                room_id, date, start, players,
                customer_email=email, customer_name=name,
            )
        )
    finally:
        client.close()

    if not result.ok:
        console.print(f"[bold red]Rejected ({result.error}):[/bold red] {result.message}")
        raise typer.Exit(code=1)
    console.print(f"[green]Booked:[/green] {result.booking_id}")


@app.command()
def cancel(
    booking_id: Annotated[str, typer.Argument(help="Booking ID.")],
    reason: Annotated[Optional[str], typer.Option(help="Cancellation reason.")] = None,
    config: ConfigOption = "config.json",
):
    """Cancel a booking."""
    client = load_client(config)
    try:
        ok, error = asyncio.run(client.cancel_booking(booking_id, reason))
    finally:
        client.close()

    if not ok:
        console.print(f"[bold red]Error:[/bold red] {error}")
        raise typer.Exit(code=1)
    console.print(f"[yellow]Cancelled {booking_id}.[/yellow]")


if __name__ == "__main__":
    app()
