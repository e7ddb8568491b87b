"""Real-time CLI dashboard for gateway monitoring."""

from datetime import datetime
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import submit_log, write_cli_log, write_upstream_log

console = Console()


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, method: str, route: str, correlation_id: str, timestamp: datetime):
        self.method = method
        self.route = route
        self.correlation_id = correlation_id[:12]
        self.timestamp = timestamp
        self.status: int | None = None
        self.elapsed_ms: float | None = None


class Dashboard:
    """Real-time dashboard showing recent proxied requests and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 12
        self._status_count = {"2xx": 0, "3xx": 0, "4xx": 0, "5xx": 0}
        self._request_count = 0
        self._error_count = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

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
        """Log a request about to be forwarded upstream."""
        with self._lock:
            self._request_count += 1
            info = RequestInfo(method, route, correlation_id, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()

        submit_log(
            write_upstream_log,
            method,
            url,
            headers,
            body,
            route=route,
            correlation_id=correlation_id,
        )
        submit_log(write_cli_log, "PROXY", f"{method} {url}", correlation_id=correlation_id or "-")

    def log_response(self, route: str, status: int, elapsed_ms: float) -> None:
        """Record the status relayed for the newest request on ``route``."""
        with self._lock:
            self._status_count[_status_class(status)] += 1
            for info in self._recent:
                if info.route == route and info.status is None:
                    info.status = status
                    info.elapsed_ms = elapsed_ms
                    break
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._error_count += 1
            self._refresh()
        submit_log(write_cli_log, "ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("RestaurantIQ Gateway", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Requests: {self._request_count}", style="blue")
        stats.append("  |  ")
        stats.append(f"2xx: {self._status_count['2xx']}", style="green")
        stats.append("  ")
        stats.append(f"3xx: {self._status_count['3xx']}", style="cyan")
        stats.append("  ")
        stats.append(f"4xx: {self._status_count['4xx']}", style="yellow")
        stats.append("  ")
        stats.append(f"5xx: {self._status_count['5xx']}", style="red")
        stats.append("  |  ")
        stats.append(f"Errors: {self._error_count}", style="bold red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", ratio=3)
            table.add_column("Status", width=6)
            table.add_column("ms", width=8, justify="right")
            table.add_column("Correlation", style="dim", width=12)

            for info in self._recent:
                if info.status is None:
                    status = Text("...", style="dim")
                else:
                    status = Text(str(info.status), style=_status_style(info.status))
                elapsed = f"{info.elapsed_ms:.0f}" if info.elapsed_ms is not None else ""
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.route,
                    status,
                    elapsed,
                    info.correlation_id or "-",
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and upstream."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(f"Forwarding to {self.config.upstream.base_url}", style="dim")

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _status_class(status: int) -> str:
    if status >= 500:
        return "5xx"
    if status >= 400:
        return "4xx"
    if status >= 300:
        return "3xx"
    return "2xx"


def _status_style(status: int) -> str:
    return {"2xx": "green", "3xx": "cyan", "4xx": "yellow", "5xx": "red"}[_status_class(status)]
