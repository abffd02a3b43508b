"""Store configuration read from ``VAULT_EDIT_*`` environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vault_edit.runtime.telemetry import env

DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class StoreSettings:
    """Where documents live and how they are decoded."""

    root: Path
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_env(
        cls, *, root: str | Path | None = None, encoding: str | None = None
    ) -> "StoreSettings":
        """Build settings, letting explicit arguments override the environment."""

        resolved_root = root if root is not None else env("ROOT", ".")
        return cls(
            root=Path(str(resolved_root)).expanduser(),
            encoding=encoding or env("ENCODING") or DEFAULT_ENCODING,
        )
