"""Capability-suffix catalog.

Loads the built-in capability families from YAML and accepts runtime
additions from generated apps.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .schemas import CapabilityFamily

logger = logging.getLogger(__name__)

DEFINITIONS_DIR = Path(__file__).parent / "definitions"


class CapabilityFamilyCatalog:
    """Ordered list of capability families; built-ins first."""

    def __init__(self, definitions_dir: Optional[Path] = None) -> None:
        self.definitions_dir = definitions_dir or DEFINITIONS_DIR
        self._families: list[CapabilityFamily] = []
        self._builtin: set[str] = set()
        self._load_families()

    def _load_families(self) -> None:
        """Load built-in families from YAML file."""
        families_file = self.definitions_dir / "capability_families.yaml"
        if not families_file.exists():
            logger.warning(f"Capability families file not found: {families_file}")
            return

        with open(families_file) as f:
            data = yaml.safe_load(f) or {}

        for family_data in data.get("families", []):
            try:
                family = CapabilityFamily(**family_data)
            except Exception as e:
                logger.error(f"Failed to load capability family: {e}")
                continue
            self._families.append(family)
            self._builtin.add(family.family)
            logger.debug(f"Loaded capability family: {family.family}")

        logger.info(f"Loaded {len(self._families)} capability families")

    def list_all(self) -> list[CapabilityFamily]:
        return list(self._families)

    def get(self, family: str) -> Optional[CapabilityFamily]:
        for item in self._families:
            if item.family == family:
                return item
        return None

    def add(self, capability: CapabilityFamily) -> bool:
        """Add a family at runtime. No-op if the family already exists."""
        if self.get(capability.family) is not None:
            return False
        self._families.append(capability)
        logger.info(f"Registered capability family: {capability.family}")
        return True

    def remove(self, family: str) -> bool:
        """Remove a family by name. Returns True if it was present."""
        for idx, item in enumerate(self._families):
            if item.family == family:
                del self._families[idx]
                self._builtin.discard(family)
                logger.info(f"Removed capability family: {family}")
                return True
        return False

    def dynamic(self) -> list[CapabilityFamily]:
        """Families added at runtime, excluding the built-in ones."""
        return [f for f in self._families if f.family not in self._builtin]

    @property
    def count(self) -> int:
        return len(self._families)
