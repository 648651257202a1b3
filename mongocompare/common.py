from __future__ import annotations

import json
import sys
import uuid
from datetime import datetime
from typing import Any, Optional, TextIO

RUN_ID = uuid.uuid4().hex[:12]


class PrintLogger:
    """Structured logger that prints one line per event."""

    LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

    def __init__(
        self,
        job_name: str = "mongocompare",
        file_path: Optional[str] = None,
        level: str = "INFO",
        stream: Optional[TextIO] = None,
    ) -> None:
        self.job_name = job_name
        self.file_path = file_path
        self.level = level.upper() if level.upper() in self.LEVELS else "INFO"
        self.stream = stream

    def _enabled(self, level: str) -> bool:
        return self.LEVELS.index(level) >= self.LEVELS.index(self.level)

    def log(self, level: str, msg: str, **fields: Any) -> None:
        level = level.upper()
        if level == "WARNING":
            level = "WARN"
        if level not in self.LEVELS:
            level = "INFO"
        if not self._enabled(level):
            return
        ts = datetime.now().astimezone().isoformat(timespec="seconds")
        rendered = " ".join(f"{key}={_render(value)}" for key, value in fields.items() if value is not None)
        line = f"{ts} {level:<5} [{self.job_name}] [{RUN_ID}] {msg}"
        if rendered:
            line = f"{line} {rendered}"
        print(line, file=self.stream or sys.stdout, flush=True)
        if self.file_path:
            with open(self.file_path, "a", encoding="utf-8") as handle:
                handle.write(line + "\n")

    def debug(self, msg: str, **fields: Any) -> None:
        self.log("DEBUG", msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self.log("INFO", msg, **fields)

    def warn(self, msg: str, **fields: Any) -> None:
        self.log("WARN", msg, **fields)

    warning = warn

    def error(self, msg: str, **fields: Any) -> None:
        self.log("ERROR", msg, **fields)


def _render(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value) if " " in value else value
    try:
        return json.dumps(value, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return str(value)


__all__ = ["PrintLogger", "RUN_ID"]
