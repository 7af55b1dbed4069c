from __future__ import annotations

from typing import Dict, Iterable, Protocol


class SettingsRepository(Protocol):
    def get_values(self, keys: Iterable[str]) -> Dict[str, str]:
        """Return the stored value for each known key; unknown keys are omitted."""

        raise NotImplementedError
