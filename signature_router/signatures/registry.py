"""Signature registry — serves template descriptors and runtime data hints.

Follows the same pattern as the other definition registries:
- Built-in definitions in a YAML file under definitions/
- Lazy loading with _loaded guard
- In-memory dict keyed by (family, signature_id)
- CRUD without persistence: runtime signatures live for the process only
- Query methods: is_action_covered, list_families, hints
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .schemas import REFRESH_ACTION, RuntimeDataHint, SignatureSummary, TemplateDescriptor

logger = logging.getLogger(__name__)

BUILTIN_FILE = "builtin_signatures.yaml"


def is_action_covered(descriptor: TemplateDescriptor, action: str) -> bool:
    """Whether a template supports an action. "refresh" is always supported."""
    return action == REFRESH_ACTION or action in descriptor.supported_actions


class SignatureRegistry:
    """Registry of template descriptors plus runtime data hints."""

    def __init__(self, definitions_dir: Optional[Path] = None):
        if definitions_dir is None:
            definitions_dir = Path(__file__).parent / "definitions"
        self.definitions_dir = definitions_dir
        self._signatures: dict[tuple[str, str], TemplateDescriptor] = {}
        self._hints: list[RuntimeDataHint] = []
        self._loaded = False

    def load(self) -> None:
        """Load the built-in signatures once."""
        if self._loaded:
            return
        self.load_builtin()
        self._loaded = True

    def load_builtin(self) -> int:
        """Register every built-in descriptor.

        Safe to repeat: the same identities are overwritten with identical data.
        """
        builtin_file = self.definitions_dir / BUILTIN_FILE
        if not builtin_file.exists():
            logger.warning(f"Built-in signatures file not found: {builtin_file}")
            return 0

        with open(builtin_file, "r") as f:
            data = yaml.safe_load(f) or {}

        loaded = 0
        for entry in data.get("signatures", []):
            try:
                descriptor = TemplateDescriptor.model_validate(entry)
            except Exception as e:
                logger.error(f"Failed to load built-in signature {entry!r}: {e}")
                continue
            self._signatures[descriptor.key] = descriptor
            loaded += 1
            logger.debug(f"Loaded signature: {descriptor.family}/{descriptor.signature_id}")

        logger.info(f"Loaded {loaded} built-in signatures")
        return loaded

    # -- Descriptors --

    def register(self, descriptor: TemplateDescriptor) -> None:
        """Upsert a descriptor by its (family, signature_id) identity."""
        self.load()
        self._signatures[descriptor.key] = descriptor
        logger.info(
            f"Registered signature: {descriptor.family}/{descriptor.signature_id} "
            f"-> {descriptor.template_id}"
        )

    def get(self, family: str, signature_id: str) -> Optional[TemplateDescriptor]:
        """Get a descriptor by identity."""
        self.load()
        return self._signatures.get((family, signature_id))

    def find_by_signature_id(self, signature_id: str) -> Optional[TemplateDescriptor]:
        """First descriptor carrying a signature id, regardless of family."""
        self.load()
        for descriptor in self._signatures.values():
            if descriptor.signature_id == signature_id:
                return descriptor
        return None

    def list_all(self) -> list[TemplateDescriptor]:
        """List all descriptors."""
        self.load()
        return list(self._signatures.values())

    def list_summaries(self) -> list[SignatureSummary]:
        """List descriptor summaries sorted by identity."""
        self.load()
        return [
            SignatureSummary(
                family=d.family,
                signature_id=d.signature_id,
                template_id=d.template_id,
                coverage_status=d.coverage_status,
                action_count=len(d.supported_actions),
            )
            for d in sorted(self._signatures.values(), key=lambda d: d.key)
        ]

    def list_families(self) -> list[str]:
        """List distinct families, sorted."""
        self.load()
        return sorted({family for family, _ in self._signatures})

    def count(self) -> int:
        """Get total number of descriptors."""
        self.load()
        return len(self._signatures)

    def unregister(self, family: str, signature_id: str) -> bool:
        """Remove a descriptor. Returns True iff it existed."""
        self.load()
        if self._signatures.pop((family, signature_id), None) is None:
            return False
        logger.info(f"Unregistered signature: {family}/{signature_id}")
        return True

    # -- Runtime data hints --

    def register_hint(self, hint: RuntimeDataHint) -> bool:
        """Add a shape hint.

        Hints with no required keys are rejected, and structural duplicates
        are ignored. Returns True only when a new hint was stored.
        """
        if not hint.required_keys:
            logger.warning(
                f"Rejected data hint without required keys for "
                f"{hint.family}/{hint.signature_id}"
            )
            return False
        if hint in self._hints:
            return False
        self._hints.append(hint)
        logger.debug(
            f"Registered data hint {hint.required_keys} -> {hint.family}/{hint.signature_id}"
        )
        return True

    def list_hints(self) -> list[RuntimeDataHint]:
        """Hints in registration order."""
        return list(self._hints)

    def unregister_hints(self, family: str) -> int:
        """Drop every hint for a family. Returns how many were removed."""
        before = len(self._hints)
        self._hints = [h for h in self._hints if h.family != family]
        removed = before - len(self._hints)
        if removed:
            logger.info(f"Removed {removed} data hints for family {family}")
        return removed
