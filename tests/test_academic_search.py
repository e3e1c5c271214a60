"""
Tests for the ordered source fallback and publication-type mapping.
"""

import pytest

from reference_tools.metadata.academic_search import AcademicSearch, map_publication_type
from reference_tools.models.reference import MetadataRecord, MetadataSource


class _Source:
    """Minimal lookup source that records the titles it was asked for."""

    def __init__(self, name, result=None, error=None):
        self.name = name
        self.result = result
        self.error = error
        self.queries = []

    def search_by_title(self, title):
        self.queries.append(title)
        if self.error:
            raise self.error
        return self.result


def _record(source: MetadataSource, title: str = "A matched paper title") -> MetadataRecord:
    return MetadataRecord(source=source, title=title, year=2020)


class TestSearchAcademicDatabases:

    def test_first_hit_short_circuits(self):
        """Test the first source with a hit ends the search."""
        crossref = _Source('CrossRef', _record(MetadataSource.CROSSREF))
        openalex = _Source('OpenAlex', _record(MetadataSource.OPENALEX))
        s2 = _Source('Semantic Scholar', _record(MetadataSource.SEMANTIC_SCHOLAR))

        result = AcademicSearch([crossref, openalex, s2]).search_academic_databases("Deep learning for cats")

        assert result.source == MetadataSource.CROSSREF
        assert crossref.queries == ["Deep learning for cats"]
        assert openalex.queries == []
        assert s2.queries == []

    def test_falls_through_to_later_source(self):
        """Test misses fall through to later sources."""
        crossref = _Source('CrossRef')
        openalex = _Source('OpenAlex')
        s2 = _Source('Semantic Scholar', _record(MetadataSource.SEMANTIC_SCHOLAR))

        result = AcademicSearch([crossref, openalex, s2]).search_academic_databases("Deep learning for cats")

        assert result.source == MetadataSource.SEMANTIC_SCHOLAR
        assert len(crossref.queries) == len(openalex.queries) == len(s2.queries) == 1

    def test_all_sources_miss(self):
        """Test None when every source misses."""
        sources = [_Source('CrossRef'), _Source('OpenAlex'), _Source('Semantic Scholar')]
        assert AcademicSearch(sources).search_academic_databases("Deep learning for cats") is None
        assert all(len(s.queries) == 1 for s in sources)

    def test_source_exception_treated_as_miss(self):
        """Test a raising source counts as a miss."""
        broken = _Source('CrossRef', error=RuntimeError("boom"))
        openalex = _Source('OpenAlex', _record(MetadataSource.OPENALEX))

        result = AcademicSearch([broken, openalex]).search_academic_databases("Deep learning for cats")

        assert result.source == MetadataSource.OPENALEX

    @pytest.mark.parametrize("title", ["", None, "Too short", "   short    "])
    def test_short_title_makes_no_request(self, title):
        """Test short titles are not searched."""
        crossref = _Source('CrossRef', _record(MetadataSource.CROSSREF))
        assert AcademicSearch([crossref]).search_academic_databases(title) is None
        assert crossref.queries == []

    def test_title_is_stripped(self):
        """Test the title is stripped before searching."""
        crossref = _Source('CrossRef', _record(MetadataSource.CROSSREF))
        AcademicSearch([crossref]).search_academic_databases("   Exactly ten   ")
        assert crossref.queries == ["Exactly ten"]

    def test_default_sources_in_priority_order(self):
        """Test the default source order."""
        names = [s.name for s in AcademicSearch().sources]
        assert names == ['CrossRef', 'OpenAlex', 'Semantic Scholar']


@pytest.mark.parametrize("raw, expected", [
    ('journal-article', "Journal Article"),
    ('article', "Journal Article"),
    ('JournalArticle', "Journal Article"),
    ('proceedings-article', "Conference Paper"),
    ('Conference', "Conference Paper"),
    ('ConferencePaper', "Conference Paper"),
    ('book-chapter', "Book Chapter"),
    ('dissertation', "Thesis"),
    ('report', "Technical Report"),
    ('posted-content', "Preprint"),
    ('preprint', "Preprint"),
    ('dataset', "Journal Article"),
    ('', "Journal Article"),
    (None, "Journal Article"),
])
def test_map_publication_type(raw, expected):
    assert map_publication_type(raw) == expected
