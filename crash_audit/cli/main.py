"""Main CLI entry point."""

import typer
from dotenv import load_dotenv
from rich.console import Console

from .audit import audit, cache_status, clear_cache

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="crash-audit",
    help="Audit deleted crash tests against open GitHub issues",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


app.command(name="audit", context_settings={"help_option_names": ["-h", "--help"]})(
    audit
)
app.command(
    name="cache-status", context_settings={"help_option_names": ["-h", "--help"]}
)(cache_status)
app.command(
    name="clear-cache", context_settings={"help_option_names": ["-h", "--help"]}
)(clear_cache)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from crash_audit import __version__

    console.print(f"Crash Audit v{__version__}")


if __name__ == "__main__":
    app()
