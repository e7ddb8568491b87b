"""Shared logging utilities."""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "gateway.log"

# Single worker keeps log lines in submission order
_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gateway-log")


def submit_log(fn, *args: Any, **kwargs: Any) -> None:
    """Run a log writer off the request path."""
    _executor.submit(fn, *args, **kwargs)


def shutdown_log_executor() -> None:
    """Flush pending log writes."""
    _executor.shutdown(wait=True)


def write_upstream_log(
    method: str,
    url: str,
    headers: dict[str, str],
    body: Any,
    *,
    route: str,
    correlation_id: str,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single proxied request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "url": url,
        "route": route,
        "correlation_id": correlation_id,
        "headers": redact_headers(headers),
        "body": body,
    }
    folder = log_root / "upstream"
    if correlation_id:
        folder = folder / _safe_name(correlation_id)
    return _write_json(folder, payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> int:
    """Remove request logs from a previous run, keeping the CLI log."""
    folder = log_root / "upstream"
    if not folder.exists():
        return 0

    deleted = 0
    for old_file in folder.rglob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower():
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _safe_name(value: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in value)[:64]


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
