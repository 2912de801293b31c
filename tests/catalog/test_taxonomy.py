"""Tests for the category taxonomy parser."""

from pathlib import Path

import pytest

from storefront.catalog.taxonomy import TaxonomyEntry, TaxonomyParser


class TestTaxonomyEntry:
    """Tests for TaxonomyEntry dataclass."""

    def test_path_parts(self) -> None:
        """Entry path can be split into parts."""
        entry = TaxonomyEntry(
            name="Laptops",
            full_path="Electronics > Computers > Laptops",
            parent_path="Electronics > Computers",
            level=3,
        )
        assert entry.path_parts == ["Electronics", "Computers", "Laptops"]

    def test_root_entry(self) -> None:
        """Root entry has level 1 and no parent."""
        entry = TaxonomyEntry(name="Electronics", full_path="Electronics")
        assert entry.level == 1
        assert entry.parent_path is None


class TestTaxonomyParser:
    """Tests for TaxonomyParser."""

    @pytest.fixture
    def parser(self) -> TaxonomyParser:
        """Create parser with embedded taxonomy."""
        parser = TaxonomyParser()
        parser.parse_embedded()
        return parser

    def test_parse_embedded(self, parser: TaxonomyParser) -> None:
        """Embedded taxonomy is parsed."""
        assert len(parser.get_all()) > 0

    def test_root_entries_in_file_order(self, parser: TaxonomyParser) -> None:
        """Roots keep file order as rank."""
        roots = parser.get_root_entries()
        assert roots[0].name == "Apparel & Accessories"
        assert [r.sort_order for r in roots] == list(range(len(roots)))

    def test_children_ranked_in_file_order(self, parser: TaxonomyParser) -> None:
        """Children are ranked in the order they appear."""
        audio = parser.get_by_path("Electronics > Audio")
        assert audio is not None
        assert [(c.name, c.sort_order) for c in audio.children] == [
            ("Headphones", 0),
            ("Speakers", 1),
        ]

    def test_parents_listed_before_children(self, parser: TaxonomyParser) -> None:
        """Entries come out parent-first."""
        seen: set[str] = set()
        for entry in parser.get_all():
            if entry.parent_path is not None:
                assert entry.parent_path in seen
            seen.add(entry.full_path)

    def test_id_prefix_ignored(self) -> None:
        """Google taxonomy id prefixes are stripped."""
        parser = TaxonomyParser()
        entries = parser.parse_lines([
            "537 - Electronics",
            "264 - Electronics > Audio",
        ])
        assert [e.full_path for e in entries] == ["Electronics", "Electronics > Audio"]

    def test_missing_ancestors_created(self) -> None:
        """A deep line creates its missing ancestors."""
        parser = TaxonomyParser()
        entries = parser.parse_lines(["Home > Kitchen > Knives"])
        assert [(e.full_path, e.level) for e in entries] == [
            ("Home", 1),
            ("Home > Kitchen", 2),
            ("Home > Kitchen > Knives", 3),
        ]

    def test_skips_comments_blanks_and_duplicates(self) -> None:
        """Comments, blank lines and repeated paths are ignored."""
        parser = TaxonomyParser()
        entries = parser.parse_lines([
            "# storefront categories",
            "",
            "Toys",
            "Toys",
            "Toys > Puzzles",
        ])
        assert [e.full_path for e in entries] == ["Toys", "Toys > Puzzles"]

    def test_name_with_dash_kept(self) -> None:
        """Only numeric prefixes are treated as ids."""
        parser = TaxonomyParser()
        entries = parser.parse_lines(["Bath - Body"])
        assert entries[0].name == "Bath - Body"

    def test_parse_file(self, tmp_path: Path) -> None:
        """Taxonomy can be read from a file."""
        path = tmp_path / "categories.txt"
        path.write_text("Garden\nGarden > Tools\n", encoding="utf-8")

        parser = TaxonomyParser()
        entries = parser.parse_file(path)

        assert len(entries) == 2
        assert entries[1].parent_path == "Garden"
