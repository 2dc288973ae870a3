"""Type aliases used across loadwork."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
