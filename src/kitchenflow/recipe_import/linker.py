"""
Ingredient Linker - connect recipe ingredient lines to the inventory.

Similarity is computed by the semantic-matching capability; this module
only decides which of its candidates to accept and writes the links.

Acceptance policy:
- confidence HIGH or MEDIUM (LOW is never linked)
- matched id present and part of the inventory snapshot
- the first still-unlinked line with exactly the candidate's name
"""

import logging

from .capabilities import RecipeStore, SemanticMatchCapability, coerce_match_candidates
from .models import InventoryItem, RecipeIngredientLine

logger = logging.getLogger(__name__)


class InventoryLinker:
    """Apply semantic matches to a recipe's unlinked ingredient lines."""

    def __init__(self, matcher: SemanticMatchCapability, store: RecipeStore):
        self.matcher = matcher
        self.store = store

    async def reconcile(
        self,
        lines: list[RecipeIngredientLine],
        inventory: list[InventoryItem],
    ) -> int:
        """
        Link unlinked lines to inventory ingredients.

        Args:
            lines: The recipe's ingredient lines (linked ones are ignored)
            inventory: The caller's current inventory snapshot

        Returns:
            Number of lines actually linked
        """
        pending = [line for line in lines if not line.ingredient_id]
        if not pending or not inventory:
            return 0

        names = [line.name for line in pending]
        raw = await self.matcher.match(names, inventory)
        candidates = coerce_match_candidates(raw, limit=len(names))
        known_ids = {item.id for item in inventory}

        linked = 0
        for candidate in candidates:
            if not candidate.is_linkable:
                continue
            if candidate.matched_id not in known_ids:
                logger.warning(
                    f"Ignoring match '{candidate.source_name}' -> unknown ingredient {candidate.matched_id}"
                )
                continue

            line = next(
                (l for l in pending if l.name == candidate.source_name and not l.ingredient_id),
                None,
            )
            if line is None:
                continue

            try:
                await self.store.link_ingredient_line(line.id, candidate.matched_id)
            except Exception as e:
                logger.warning(f"Failed to link ingredient line {line.id} ('{line.name}'): {e}")
                continue

            line.ingredient_id = candidate.matched_id
            linked += 1

        logger.info(f"Linked {linked}/{len(pending)} ingredient lines")
        return linked
