"""``signal-bot doctor``: is this machine ready to run the bot?

Checks that signal-cli is installed and answers ``--version``, that the
bot account is configured as ``+<digits>``, and whether the signal-cli
state directory exists yet.  A missing data directory is only reported;
the other checks decide the exit code.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from signalbot.config import DEFAULT_ENV_FILE, BotConfig
from signalbot.validation import is_valid_phone_number, mask_phone_number


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single diagnostic check."""

    name: str
    passed: bool
    message: str
    required: bool = True


# Individual checks ----------------------------------------------------------


def _check_signal_cli(executable: str) -> CheckResult:
    """Check ``signal-cli`` is installed and runs."""
    path = shutil.which(executable)
    if not path:
        return CheckResult(
            "signal-cli",
            False,
            f"{executable} not found (install: https://github.com/AsamK/signal-cli)",
        )
    try:
        result = subprocess.run(  # noqa: S603
            [path, "--version"],
            capture_output=True,
            text=True,
            check=False,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return CheckResult("signal-cli", False, f"{path} failed to run")
    if result.returncode != 0:
        return CheckResult("signal-cli", False, f"{path} --version failed")
    return CheckResult("signal-cli", True, result.stdout.strip() or path)


def _check_account(config: BotConfig) -> CheckResult:
    """Check the bot's own phone number is set and well-formed."""
    if not config.phone_number:
        return CheckResult("Account", False, "SIGNAL_PHONE_NUMBER is not set")
    masked = mask_phone_number(config.phone_number)
    if not is_valid_phone_number(config.phone_number):
        return CheckResult("Account", False, f"{masked} is not +<digits>")
    return CheckResult("Account", True, masked)


def _check_data_dir(config: BotConfig) -> CheckResult:
    """Check the signal-cli state directory exists (informational)."""
    data_dir = Path(config.data_dir)
    if data_dir.is_dir():
        return CheckResult("Data directory", True, str(data_dir), required=False)
    return CheckResult(
        "Data directory",
        False,
        f"{data_dir} not found (run: signal-cli --config {data_dir} link)",
        required=False,
    )


def _load_settings(env_file: Path | None) -> BotConfig | CheckResult:
    """Load settings without aborting; return a failed check on error."""
    if env_file is not None and not env_file.exists():
        env_file = None
    try:
        return BotConfig(_env_file=env_file)  # pyright: ignore[reportCallIssue]
    except ValidationError as exc:
        return CheckResult(
            "Configuration", False, f"{exc.error_count()} invalid setting(s)"
        )


# Aggregator -----------------------------------------------------------------


def _print_check(check: CheckResult) -> None:
    """Print a single check result with the appropriate symbol."""
    if check.passed:
        symbol = "\u2713"  # ✓
    elif check.required:
        symbol = "\u2717"  # ✗
    else:
        symbol = "\u25cb"  # ○
    print(f"  {symbol} {check.name}: {check.message}")


def check_environment(env_file: Path | None = DEFAULT_ENV_FILE) -> int:
    """Run all diagnostics. Returns 0 if all required pass, 1 otherwise."""
    from importlib.metadata import version

    print(f"signal-bot {version('signal-bot')}")
    print()

    loaded = _load_settings(env_file)
    if isinstance(loaded, CheckResult):
        executable = os.environ.get("SIGNAL_CLI_PATH") or "signal-cli"
        checks = [loaded, _check_signal_cli(executable)]
    else:
        checks = [
            _check_signal_cli(loaded.signal_cli),
            _check_account(loaded),
            _check_data_dir(loaded),
        ]

    for check in checks:
        _print_check(check)

    required_failures = [c for c in checks if c.required and not c.passed]
    if required_failures:
        count = len(required_failures)
        print(f"\n{count} required check(s) failed.")
        return 1
    print("\nAll required checks passed.")
    return 0
