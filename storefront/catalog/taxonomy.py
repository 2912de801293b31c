"""Category taxonomy parser.

Reads a category tree from a plain-text taxonomy, one category per line
written as its full path. An optional numeric id prefix (the Google
Product Taxonomy export format) is accepted and ignored.

Taxonomy format example:
    Electronics
    Electronics > Audio
    Electronics > Audio > Headphones
    1604 - Apparel & Accessories > Clothing

Line order is sibling order: the first child listed under a parent gets
rank 0. Ancestors missing from the file are created implicitly.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

_ID_PREFIX = re.compile(r"^\d+\s+-\s+")


@dataclass
class TaxonomyEntry:
    """A category read from a taxonomy file.

    Attributes:
        name: Category name (leaf part of the path).
        full_path: Full category path (e.g., "Electronics > Audio > Headphones").
        parent_path: Path of the parent entry, None for a root.
        level: Depth in the tree (1 = root).
        sort_order: Rank among siblings in file order.
    """

    name: str
    full_path: str
    parent_path: str | None = None
    level: int = 1
    sort_order: int = 0
    children: list["TaxonomyEntry"] = field(default_factory=list, repr=False)

    @property
    def path_parts(self) -> list[str]:
        """Get list of path components."""
        return [part.strip() for part in self.full_path.split(">")]


class TaxonomyParser:
    """Parser for category taxonomy files.

    Example usage:
        parser = TaxonomyParser()
        entries = parser.parse_file("categories.txt")
        roots = parser.get_root_entries()
    """

    # Default storefront tree used by the seeding command
    EMBEDDED_TAXONOMY = '''
Apparel & Accessories
Apparel & Accessories > Clothing
Apparel & Accessories > Clothing > Shirts & Tops
Apparel & Accessories > Clothing > Pants
Apparel & Accessories > Clothing > Dresses
Apparel & Accessories > Clothing > Outerwear
Apparel & Accessories > Shoes
Apparel & Accessories > Handbags
Electronics
Electronics > Audio
Electronics > Audio > Headphones
Electronics > Audio > Speakers
Electronics > Computers
Electronics > Computers > Laptops
Electronics > Computers > Tablets
Electronics > Mobile Phones
Home & Garden
Home & Garden > Home Decor
Home & Garden > Kitchen & Dining
Home & Garden > Furniture
Health & Beauty
Health & Beauty > Personal Care
Health & Beauty > Fragrances
Sporting Goods
Sporting Goods > Exercise & Fitness
Sporting Goods > Outdoor Recreation
Toys & Games
Toys & Games > Board Games
Toys & Games > Puzzles
'''.strip()

    def __init__(self) -> None:
        """Initialize parser with empty entry storage."""
        self._entries: dict[str, TaxonomyEntry] = {}
        self._root_entries: list[TaxonomyEntry] = []

    def parse_embedded(self) -> list[TaxonomyEntry]:
        """Parse the embedded default taxonomy.

        Returns:
            Entries in parent-first order.
        """
        return self.parse_lines(self.EMBEDDED_TAXONOMY.splitlines())

    def parse_file(self, path: str | Path) -> list[TaxonomyEntry]:
        """Parse taxonomy from file.

        Args:
            path: Path to taxonomy file.

        Returns:
            Entries in parent-first order.
        """
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
        return self.parse_lines(lines)

    def parse_lines(self, lines: list[str]) -> list[TaxonomyEntry]:
        """Parse taxonomy from lines.

        Blank lines and lines starting with ``#`` are skipped, as are
        duplicate paths.

        Args:
            lines: Lines from a taxonomy file.

        Returns:
            Entries in parent-first order.
        """
        self._entries.clear()
        self._root_entries.clear()

        for line in lines:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            line = _ID_PREFIX.sub("", line)
            parts = [part.strip() for part in line.split(">") if part.strip()]
            if not parts:
                continue

            for depth in range(1, len(parts) + 1):
                self._add(parts[:depth])

        return list(self._entries.values())

    def _add(self, parts: list[str]) -> TaxonomyEntry:
        full_path = " > ".join(parts)
        existing = self._entries.get(full_path)
        if existing is not None:
            return existing

        parent = self._entries.get(" > ".join(parts[:-1])) if len(parts) > 1 else None
        siblings = parent.children if parent is not None else self._root_entries
        entry = TaxonomyEntry(
            name=parts[-1],
            full_path=full_path,
            parent_path=parent.full_path if parent is not None else None,
            level=len(parts),
            sort_order=len(siblings),
        )
        siblings.append(entry)
        self._entries[full_path] = entry
        return entry

    def get_by_path(self, full_path: str) -> TaxonomyEntry | None:
        """Get entry by full path.

        Args:
            full_path: Path such as "Electronics > Audio".

        Returns:
            Entry if found, None otherwise.
        """
        return self._entries.get(full_path)

    def get_root_entries(self) -> list[TaxonomyEntry]:
        """Get top-level entries in file order."""
        return self._root_entries

    def get_all(self) -> list[TaxonomyEntry]:
        """Get all entries in parent-first order."""
        return list(self._entries.values())
