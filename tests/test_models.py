"""Tests for termipaper.models: Entry merge rules and Index (de)serialization."""

import pytest

from termipaper.models import Entry, Index


class TestUpdateMetadata:
    def test_only_year_preserves_title_and_authors(self):
        entry = Entry(title="X", authors=["A", "B"], year=2019)
        entry.update_metadata(Entry(year=2020))
        assert entry == Entry(title="X", authors=["A", "B"], year=2020)

    def test_present_fields_overwrite(self):
        entry = Entry(title="Old", authors=["A"], year=2019, doi="10.1/old")
        entry.update_metadata(Entry(title="New", authors=["C"], doi="10.1/new"))
        assert entry.title == "New"
        assert entry.authors == ["C"]
        assert entry.year == 2019
        assert entry.doi == "10.1/new"

    def test_file_never_merged(self):
        entry = Entry(file="a1.pdf")
        entry.update_metadata(Entry(file="/tmp/other.pdf"))
        assert entry.file == "a1.pdf"

    def test_authors_not_aliased(self):
        partial = Entry(authors=["A"])
        entry = Entry()
        entry.update_metadata(partial)
        partial.authors.append("B")
        assert entry.authors == ["A"]

    def test_empty_partial_is_noop(self):
        entry = Entry(title="X", year=2000)
        entry.update_metadata(Entry())
        assert entry == Entry(title="X", year=2000)


class TestEntryDict:
    def test_to_dict_omits_none(self):
        assert Entry(title="X", file="a1.pdf").to_dict() == {"title": "X", "file": "a1.pdf"}

    def test_empty(self):
        assert Entry().to_dict() == {}
        assert Entry.from_dict(None) == Entry()
        assert Entry.from_dict({}) == Entry()

    def test_from_dict_full(self):
        e = Entry.from_dict(
            {"title": "T", "authors": ["A"], "year": 2020, "doi": "10.1/x", "file": "k.pdf"}
        )
        assert e == Entry(title="T", authors=["A"], year=2020, doi="10.1/x", file="k.pdf")

    def test_unknown_keys_ignored(self):
        assert Entry.from_dict({"title": "T", "journal": "Nature"}) == Entry(title="T")

    @pytest.mark.parametrize(
        "data",
        [
            {"year": -1},
            {"year": "2020"},
            {"year": True},
            {"authors": "A. Smith"},
            {"authors": ["A", 3]},
            {"title": 12},
            {"file": ["a"]},
        ],
    )
    def test_wrong_types_rejected(self, data):
        with pytest.raises(ValueError):
            Entry.from_dict(data)

    @pytest.mark.parametrize("stored", ["../victim.txt", "/tmp/a1.pdf", "x/a1.pdf", "."])
    def test_file_must_be_bare_name(self, stored):
        with pytest.raises(ValueError, match="bare file name"):
            Entry.from_dict({"file": stored})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError, match="mapping"):
            Entry.from_dict(["title"])


class TestIndexDict:
    def test_shape(self):
        index = Index(papers={"a1": Entry(title="X", file="a1.pdf")}, sub_categories=["reviews"])
        assert index.to_dict() == {
            "papers": {"a1": {"title": "X", "file": "a1.pdf"}},
            "sub_categories": ["reviews"],
        }

    def test_missing_sections_default_empty(self):
        assert Index.from_dict({}) == Index()
        assert Index.from_dict({"papers": None, "sub_categories": None}) == Index()

    def test_numeric_keys_become_strings(self):
        index = Index.from_dict({"papers": {2020: {"title": "T"}}})
        assert list(index.papers) == ["2020"]

    def test_bad_paper_names_key(self):
        with pytest.raises(ValueError, match="paper 'a1'"):
            Index.from_dict({"papers": {"a1": {"year": "soon"}}})

    def test_papers_must_be_mapping(self):
        with pytest.raises(ValueError, match="'papers' must be a mapping"):
            Index.from_dict({"papers": ["a1"]})

    def test_sub_categories_must_be_list(self):
        with pytest.raises(ValueError, match="'sub_categories' must be a list"):
            Index.from_dict({"sub_categories": "reviews"})

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping at top level"):
            Index.from_dict("just a string")

    def test_sub_category_must_be_bare_name(self):
        with pytest.raises(ValueError, match="sub-category '../x'"):
            Index.from_dict({"sub_categories": ["reviews", "../x"]})
