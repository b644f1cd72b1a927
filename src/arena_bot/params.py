"""
Runtime tunable parameters with JSON persistence.

The controller and the CLI share one Parameters instance. Values
loaded from params.json can be overridden from the command line
before the session starts, and written back with --save-params.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from config import HEARTBEAT, LOG_DIR, SERVER_URL

logger = logging.getLogger(__name__)

PARAMS_FILE = Path(__file__).parent / "params.json"


@dataclass
class Parameters:
    """Runtime tunable parameters."""

    # Game server
    server_url: str = SERVER_URL
    heartbeat: float = HEARTBEAT  # seconds, 0 = disabled

    # Message log ([send]/[recv] lines per player)
    message_log: bool = True
    log_dir: str = LOG_DIR

    def update(self, **overrides) -> list[str]:
        """
        Apply overrides (params.json entries or CLI flags).

        None means "not given" and is skipped. Unknown names and values
        that cannot be coerced to the field's type are logged and ignored.

        Returns:
            Names of the fields that changed.
        """
        known = {f.name for f in fields(self)}
        changed = []
        for name, value in overrides.items():
            if value is None:
                continue
            if name not in known:
                logger.warning(f"Unknown parameter: {name}")
                continue

            current = getattr(self, name)
            try:
                coerced = type(current)(value)
            except (TypeError, ValueError):
                logger.warning(f"Invalid value for {name}: {value!r}")
                continue

            if coerced != current:
                setattr(self, name, coerced)
                changed.append(name)
        return changed

    def save(self, path: Path = PARAMS_FILE):
        """Write all parameters to a JSON file."""
        path = Path(path)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info(f"Parameters saved to {path}")

    @classmethod
    def load(cls, path: Path = PARAMS_FILE) -> Parameters:
        """Parameters from a JSON file; defaults when it is missing or unreadable."""
        path = Path(path)
        params = cls()
        if not path.exists():
            return params

        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {path}: {e}, using defaults")
            return params

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: expected a JSON object")
            return params

        params.update(**data)
        logger.info(f"Parameters loaded from {path}")
        return params

    def to_dict(self) -> dict:
        return asdict(self)
