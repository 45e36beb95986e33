"""Text or JSON rendering for command results.

Reports go to stdout. Errors and warnings go to stderr, so ``--json``
output stays parseable.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional, TextIO


class OutputFormatter:
    """Renders command results in the mode selected by ``--json``."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def _emit(self, payload: Any, stream: Optional[TextIO] = None) -> None:
        print(json.dumps(payload, indent=self.indent, default=str), file=stream or sys.stdout)

    def json_output(self, data: Any) -> None:
        self._emit(data)

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        if self.json_mode:
            self._emit({"status": status, **data})
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` under ``error_code``.

        rulestack exceptions contribute their ``code`` and ``context`` to the
        JSON form.
        """
        text = message or str(error)
        if not self.json_mode:
            print(f"Error: {text}", file=sys.stderr)
            return

        body: Dict[str, Any] = {"error": error_code, "message": text}
        if hasattr(error, "to_json_error"):
            details = error.to_json_error()
            body["code"] = details.get("code")
            body["context"] = details.get("context", {})
        self._emit(body, sys.stderr)

    def text(self, message: str) -> None:
        if not self.json_mode:
            print(message)

    def warning(self, message: str) -> None:
        if not self.json_mode:
            print(f"Warning: {message}", file=sys.stderr)

    def text_list(self, title: str, items: Iterable[str], prefix: str = "  ") -> None:
        """Print ``title`` and one line per item; silent for empty lists and JSON mode."""
        lines = [f"{prefix}{item}" for item in items]
        if self.json_mode or not lines:
            return
        print("\n".join([title, *lines]))


__all__ = ["OutputFormatter"]
