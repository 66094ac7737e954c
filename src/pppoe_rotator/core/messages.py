"""User-visible notification texts, one builder per cycle outcome."""

from typing import Tuple

from .models import Thresholds

Message = Tuple[str, str]


def status_ok(name: str, usage: int) -> Message:
    return (
        "WiFi Status OK ✓",
        f"Current ID: '{name}'\nUsage: {usage} minutes (within limit)",
    )


def switched(old_name: str, new_name: str, old_usage: int) -> Message:
    return (
        "WiFi ID Switched ✓",
        f"Successfully switched from '{old_name}' to '{new_name}'\nOld usage: {old_usage} minutes",
    )


def switch_rejected(old_name: str, new_name: str) -> Message:
    return (
        "WiFi Switch Failed ✗",
        f"Failed to switch from '{old_name}' to '{new_name}'",
    )


def switch_error(error: str) -> Message:
    return (
        "WiFi Switch Error",
        f"Error switching WiFi ID: {error}",
    )


def disabled(name: str, usage: int, thresholds: Thresholds) -> Message:
    return (
        "PPPoE Connection Disabled 🛑",
        f"All IDs exceeded {thresholds.available} min limit.\n"
        f"Current ID '{name}' has {usage} minutes (>{thresholds.disable}).\n"
        "Connection disabled to prevent charges.",
    )


def disable_failed(usage: int, error: str = None) -> Message:
    body = f"All IDs exceeded limit but couldn't disable connection.\nCurrent usage: {usage} minutes"
    if error:
        body += f"\nError: {error}"
    return ("Failed to Disable PPPoE ✗", body)


def no_identity_available(name: str, usage: int, thresholds: Thresholds) -> Message:
    return (
        "No WiFi IDs Available ⚠",
        f"All PPPoE IDs have exceeded the {thresholds.available} minute limit!\n"
        f"Current ID: '{name}' - {usage} minutes (≤{thresholds.disable} to avoid disconnect)",
    )
