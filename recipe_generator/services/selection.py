"""In-memory selection state for one session.

Holds chosen ingredient ids, dietary restriction ids and free text. Names are
resolved against a Catalog in catalog order; ids missing from the catalog
(left over from an earlier load) are dropped from the names sent to the model
and labelled as unknown when displayed.
"""

from typing import List, Optional

from recipe_generator.models.models import Catalog


class Selection:
    """Mutable selection, changed only through add/remove/toggle/reset."""

    def __init__(self) -> None:
        self._ingredient_ids: set[str] = set()
        self._dietary_ids: set[str] = set()
        self.free_text: str = ""

    @property
    def ingredient_ids(self) -> frozenset[str]:
        return frozenset(self._ingredient_ids)

    @property
    def dietary_ids(self) -> frozenset[str]:
        return frozenset(self._dietary_ids)

    def add_ingredient(self, ingredient_id: str) -> None:
        self._ingredient_ids.add(ingredient_id)

    def remove_ingredient(self, ingredient_id: str) -> None:
        self._ingredient_ids.discard(ingredient_id)

    def toggle_dietary(self, dietary_id: str) -> bool:
        """Flip a dietary restriction. Returns True if it is now selected."""
        if dietary_id in self._dietary_ids:
            self._dietary_ids.discard(dietary_id)
            return False
        self._dietary_ids.add(dietary_id)
        return True

    def set_free_text(self, text: str) -> None:
        self.free_text = text or ""

    def reset(self) -> None:
        self._ingredient_ids.clear()
        self._dietary_ids.clear()
        self.free_text = ""

    def is_empty(self, catalog: Optional[Catalog] = None) -> bool:
        """True when there is nothing to generate from.

        Dietary restrictions alone do not count as input. With a catalog, only
        ingredient ids present in it count.
        """
        if self.free_text.strip():
            return False
        if catalog is None:
            return not self._ingredient_ids
        return not self.ingredient_names(catalog)

    def ingredient_names(self, catalog: Catalog) -> List[str]:
        return [ing.name for ing in catalog.ingredients if ing.id in self._ingredient_ids]

    def dietary_names(self, catalog: Catalog) -> List[str]:
        return [diet.name for diet in catalog.dietary_restrictions if diet.id in self._dietary_ids]

    def ingredient_labels(self, catalog: Catalog) -> List[str]:
        """Display labels for every selected id, stale ids included."""
        return sorted(catalog.ingredient_name(ingredient_id) for ingredient_id in self._ingredient_ids)

    def dietary_labels(self, catalog: Catalog) -> List[str]:
        return sorted(catalog.dietary_name(dietary_id) for dietary_id in self._dietary_ids)
