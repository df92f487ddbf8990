"""
Error types for AeroSpace Layout Manager.

Fatal errors abort a layout run with a nonzero exit code. Best-effort
window manager failures are raised as WindowManagerError and caught by the
layout engine, which logs them and keeps going.
"""

from typing import Any, Dict, Optional


class LayoutManagerError(Exception):
    """Base exception for layout manager errors."""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize layout manager error.

        Args:
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary.

        Returns:
            Error dictionary with type, message, suggestion, and context
        """
        result: Dict[str, Any] = {
            "type": type(self).__name__,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigError(LayoutManagerError):
    """Configuration file missing, unreadable, or invalid."""


class LayoutNotFoundError(LayoutManagerError):
    """Requested layout name is absent from the configuration."""

    def __init__(self, layout_name: str, available: Optional[list] = None):
        available = available or []
        super().__init__(
            f"Layout '{layout_name}' not found",
            suggestion=(
                f"Available layouts: {', '.join(available)}" if available
                else "Add a layout to the configuration file"
            ),
            context={"layout": layout_name, "available": available}
        )
        self.layout_name = layout_name


class CommandError(LayoutManagerError):
    """External command exited with a nonzero status or timed out."""

    def __init__(
        self,
        command: list,
        returncode: Optional[int],
        stderr: str = "",
        message: Optional[str] = None
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            message or f"Command failed ({returncode}): {' '.join(self.command)}",
            context={"command": self.command, "returncode": returncode, "stderr": stderr}
        )


class WindowManagerError(LayoutManagerError):
    """An aerospace command failed or returned unparseable output."""


# Display resolution errors

class DisplayResolutionError(LayoutManagerError):
    """Display selector did not resolve to exactly one display."""


class NoDisplaysFound(DisplayResolutionError):
    """Display inventory query returned no displays."""

    def __init__(self, message: str = "No displays found"):
        super().__init__(
            message,
            suggestion="Check `system_profiler SPDisplaysDataType -json` output"
        )


class AmbiguousOrMissingMain(DisplayResolutionError):
    """No display (or more than one) is flagged as main."""


class AmbiguousSecondary(DisplayResolutionError):
    """More than one display could be the secondary display."""


class AmbiguousExternal(DisplayResolutionError):
    """More than one external display is attached."""


class NoInternalDisplay(DisplayResolutionError):
    """No built-in display is attached."""


class DisplayIdNotFound(DisplayResolutionError):
    """No display matches the numeric id."""


class DisplayNameNotFound(DisplayResolutionError):
    """No display name matches the pattern."""
