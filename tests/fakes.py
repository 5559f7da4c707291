"""Test doubles for the external collaborators: mongodump and SendGrid."""

from __future__ import annotations

import subprocess
from pathlib import Path

TIMESTAMP = "2024-01-01_00-00-00"


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content


class FakeSession:
    def __init__(self, status_code: int = 202, content: bytes = b"", error=None) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[dict] = []
        self._response = FakeResponse(status_code, content)
        self._error = error

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self._error is not None:
            raise self._error
        return self._response


class FakeMongodump:
    """Stands in for subprocess.run; writes one BSON file under --out."""

    def __init__(self, returncode: int = 0, create_output: bool = True) -> None:
        self.returncode = returncode
        self.create_output = create_output
        self.commands: list[list[str]] = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        out = Path(command[command.index("--out") + 1])
        if self.create_output:
            collection_dir = out / "orders"
            collection_dir.mkdir(parents=True, exist_ok=True)
            (collection_dir / "items.bson").write_bytes(b"\x16\x00\x00\x00bson-ish")
        return subprocess.CompletedProcess(
            command,
            self.returncode,
            stdout="writing orders.items to dump\n",
            stderr="" if self.returncode == 0 else "Failed: auth error\n",
        )
