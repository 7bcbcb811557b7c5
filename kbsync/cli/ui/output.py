# kbsync/cli/ui/output.py
"""Output methods for CLI display."""

from __future__ import annotations

from .console import CHECK, CROSS, WARN, Panel, Table, console

STATUS_STYLES = {
    "success": "green",
    "pending": "yellow",
    "error": "red",
}


class UI:
    """Styled console output shared by all commands."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a command header in a fitted box."""
        if subtitle:
            content = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            content = f"[bold]{title}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]{CHECK}[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]{CROSS}[/red] {msg}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]{WARN}[/yellow] {msg}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def summary_panel(self, content: str, title: str = "", style: str = "green") -> None:
        """Print a summary panel (full-width, typically at end of command)."""
        console.print(Panel(content, title=title, border_style=style))

    def table(self, headers: list[str], rows: list[list[str]], title: str = "") -> None:
        table = Table(title=title) if title else Table()
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*[str(cell) for cell in row])
        console.print(table)

    def status_label(self, status: str) -> str:
        """Colour a processing status for table cells."""
        style = STATUS_STYLES.get(status, "white")
        return f"[{style}]{status}[/{style}]"
