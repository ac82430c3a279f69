"""Command-line interface for ghcard."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ghcard import CardConfig, CardGenerator, save_image, save_json, __version__
from ghcard.config import LogFormat
from ghcard.exceptions import GhcardError

app = typer.Typer(
    name="ghcard",
    help="Social preview cards for GitHub profiles",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"ghcard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """ghcard - social preview cards for GitHub profiles."""
    pass


@app.command()
def render(
    username: str = typer.Argument(..., help="GitHub username"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file (default: <username>.png, or .json with --tree)"
    ),
    dark: bool = typer.Option(False, "--dark", help="Use the dark theme"),
    tree: bool = typer.Option(
        False, "--tree", help="Write the visual tree as JSON instead of a PNG"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress output, only show errors"
    ),
):
    """Render the card for a user."""
    config = CardConfig(log_format=LogFormat.CONSOLE if not quiet else LogFormat.JSON)

    async def run():
        async with CardGenerator(config) as generator:
            if tree:
                try:
                    card = await generator.build_tree(username, dark=dark)
                except GhcardError as e:
                    console.print(f"[red]✗[/red] Failed to build card for {username}: {e}")
                    raise typer.Exit(1)
                path = save_json(card, output or Path(f"{username}.json"))
                console.print(f"[dim]Saved tree to {path}[/dim]")
                return

            result = await generator.generate(username, dark=dark)
            path = save_image(result, output or Path(f"{username}.png"))
            if not result.success:
                console.print(f"[red]✗[/red] {result.error_message} [dim](error card saved to {path})[/dim]")
                raise typer.Exit(1)
            if not quiet:
                console.print(
                    f"[green]✓[/green] Rendered @{username} "
                    f"({result.width}x{result.height}, {result.duration_ms:.0f} ms) to {path}"
                )

    asyncio.run(run())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Serve the card endpoint over HTTP."""
    import uvicorn

    console.print(f"Serving on http://{host}:{port}/api/github?username=<name>")
    uvicorn.run("ghcard.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
