"""In-memory store for generated tool executors and template source.

Executors are keyed by full tool name, template source by signature id.
Registration replaces, unregistration deletes; there is no versioning.
Candidate templates accumulate per (family, signature_id) up to
CANDIDATE_LIMIT entries, first come first kept.
"""

import logging
from typing import Any, Optional

from signature_router.signatures.schemas import TemplateDescriptor

logger = logging.getLogger(__name__)

CANDIDATE_LIMIT = 5


class GeneratedArtifactStore:
    """Generated executors, template source and candidate templates."""

    def __init__(self) -> None:
        self._executors: dict[str, Any] = {}
        self._template_source: dict[str, str] = {}
        self._candidates: dict[tuple[str, str], list[str]] = {}

    # -- Executors --

    def register_executor(self, tool: Any) -> None:
        """Store a tool object (name, description, parameters, execute) by its name."""
        name = getattr(tool, "name", None)
        if not name:
            raise ValueError("Generated tool must have a name")
        self._executors[name] = tool
        logger.info(f"Registered generated tool: {name}")

    def unregister_executor(self, name: str) -> bool:
        if self._executors.pop(name, None) is None:
            return False
        logger.info(f"Unregistered generated tool: {name}")
        return True

    def get_executor(self, name: str) -> Optional[Any]:
        return self._executors.get(name)

    def list_executor_names(self) -> list[str]:
        return list(self._executors.keys())

    # -- Template source --

    def register_template_source(self, signature_id: str, source: str) -> None:
        self._template_source[signature_id] = source
        logger.info(f"Registered template source for {signature_id} ({len(source)} chars)")

    def unregister_template_source(self, signature_id: str) -> bool:
        if self._template_source.pop(signature_id, None) is None:
            return False
        logger.info(f"Unregistered template source for {signature_id}")
        return True

    def get_template_source(self, signature_id: str) -> Optional[str]:
        return self._template_source.get(signature_id)

    # -- Candidates --

    def register_candidate(self, descriptor: TemplateDescriptor, source: str) -> bool:
        """Append a candidate template; dropped once the key holds CANDIDATE_LIMIT."""
        bucket = self._candidates.setdefault(descriptor.key, [])
        if len(bucket) >= CANDIDATE_LIMIT:
            logger.debug(
                f"Candidate limit reached for {descriptor.family}/{descriptor.signature_id}"
            )
            return False
        bucket.append(source)
        logger.debug(
            f"Stored candidate {len(bucket)}/{CANDIDATE_LIMIT} for "
            f"{descriptor.family}/{descriptor.signature_id}"
        )
        return True

    def list_candidates(self, family: str, signature_id: str) -> list[str]:
        return list(self._candidates.get((family, signature_id), []))

    def clear_candidates(self, family: str, signature_id: str) -> int:
        """Drop every candidate for a key. Returns how many were removed."""
        removed = len(self._candidates.pop((family, signature_id), []))
        if removed:
            logger.info(f"Cleared {removed} candidates for {family}/{signature_id}")
        return removed
