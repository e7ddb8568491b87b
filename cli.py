"""CLI entry point for restaurantiq-gateway."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from health import print_health_status
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, shutdown_log_executor, write_cli_log
from ui.plain import PlainLogger

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    plain = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            healthy = print_health_status(config)
            sys.exit(0 if healthy else 1)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Upstream:[/bold] {config.upstream.base_url}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True
        else:
            console.print(f"[red][ERROR][/red] Unknown option: {arg}")
            _print_help()
            sys.exit(2)

    # Clear previous logs and start dashboard
    clear_logs()
    dashboard = None if plain else Dashboard(config)
    logger = PlainLogger() if dashboard is None else dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="info" if plain and config.proxy.debug else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Gateway started",
        port=config.proxy.port,
        upstream=config.upstream.base_url,
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Gateway stopped", duration=str(duration))
        shutdown_log_executor()
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]RestaurantIQ Gateway[/bold cyan]

Forwards /api/restaurants/* and /api/auth/* to the RestaurantIQ backend API.

[bold]Usage:[/bold]
    restaurantiq-gateway              Start with live dashboard
    restaurantiq-gateway --plain      Start with plain log lines
    restaurantiq-gateway --check      Check upstream health
    restaurantiq-gateway --config     Show config location and upstream
    restaurantiq-gateway --help       Show this help

[bold]Upstream:[/bold]
    Set upstream.base_url in the config file, or RESTAURANTIQ_API_URL.
    Defaults to http://localhost:3000.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
