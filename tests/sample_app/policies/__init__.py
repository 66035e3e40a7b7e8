"""Policies for the convention-resolver sample app."""

from __future__ import annotations

from typing import Any


class TagPolicy:
    def can(self, identity: Any, action: str, resource: Any) -> bool:
        return action == "view"
