"""Line-oriented request logger for runs without the live dashboard."""

from typing import Any

from rich.console import Console

from ui.log_utils import submit_log, write_cli_log, write_upstream_log

console = Console()


class PlainLogger:
    """Print one line per event and keep the same log files as Dashboard."""

    def __init__(self, write_files: bool = True):
        self.write_files = write_files

    def log_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any = None,
        *,
        route: str,
        correlation_id: str,
    ) -> None:
        console.print(f"[blue]->[/blue] {method} {url} [dim]{correlation_id}[/dim]")
        if self.write_files:
            submit_log(
                write_upstream_log,
                method,
                url,
                headers,
                body,
                route=route,
                correlation_id=correlation_id,
            )

    def log_response(self, route: str, status: int, elapsed_ms: float) -> None:
        style = "green" if status < 400 else "yellow" if status < 500 else "red"
        console.print(f"[{style}]<- {status}[/{style}] {route} [dim]{elapsed_ms:.0f}ms[/dim]")

    def log_error(self, route: str, status: int, message: str) -> None:
        console.print(f"[red][ERROR][/red] {route} {status}: {message[:200]}")
        if self.write_files:
            submit_log(write_cli_log, "ERROR", message[:200], route=route, status=status)
