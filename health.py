"""Upstream reachability check for the CLI."""

import httpx
from rich.console import Console

from core.config import Config, load_config

console = Console()

HEALTH_PATH = "/health"


def check_upstream(config: Config, timeout: float = 5.0) -> tuple[bool, str]:
    """Probe the upstream health endpoint. Returns (healthy, detail)."""
    url = config.upstream_target().url_for(HEALTH_PATH)
    try:
        response = httpx.get(url, timeout=timeout)
    except httpx.RequestError as e:
        return False, f"{url} unreachable: {e}"

    if response.status_code != 200:
        return False, f"{url} answered {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return False, f"{url} answered with a non-JSON body"
    if not isinstance(body, dict) or body.get("success") is False:
        return False, f"{url} reported failure"
    return True, f"{url} {body.get('message', 'ok')}"


def print_health_status(config: Config | None = None) -> bool:
    """Print upstream status; True when healthy."""
    config = config or load_config()
    healthy, detail = check_upstream(config)
    if healthy:
        console.print(f"[green]Upstream healthy[/green] ({detail})")
    else:
        console.print(f"[red]Upstream not healthy[/red] ({detail})")
        console.print("\n[dim]Point the gateway elsewhere with[/dim] RESTAURANTIQ_API_URL")
    return healthy


def main():
    """CLI entry point for the upstream check."""
    print_health_status()


if __name__ == "__main__":
    main()
