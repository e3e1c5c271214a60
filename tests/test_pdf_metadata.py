"""
Tests for the PDF metadata pipeline: merge precedence, reconciliation and
soft failure on unreadable files.
"""

from reference_tools.metadata import pdf_metadata
from reference_tools.metadata.pdf_metadata import PDFMetadataExtractor, merge_records
from reference_tools.metadata.text_heuristics import TextHeuristicsExtractor
from reference_tools.models.reference import MetadataRecord, MetadataSource, RawDocumentText


class _Search:
    def __init__(self, result=None):
        self.result = result
        self.titles = []

    def search_academic_databases(self, title):
        self.titles.append(title)
        return self.result


class _Ranking:
    def __init__(self, tag=None):
        self.tag = tag
        self.journals = []

    def get_journal_ranking_tag(self, journal):
        self.journals.append(journal)
        return self.tag


def _guess(**overrides) -> MetadataRecord:
    values = dict(
        source=MetadataSource.PDF_HEURISTIC, title="Deep Learning for Cats", authors=["Jane Doe"],
        year=2019, journal="Cat Journal", abstract="From the PDF.", doi="10.1000/pdf",
    )
    values.update(overrides)
    return MetadataRecord(**values)


def _pipeline(search=None, ranking=None) -> PDFMetadataExtractor:
    return PDFMetadataExtractor(
        heuristics=TextHeuristicsExtractor(current_year=2024),
        academic_search=search or _Search(),
        ranking_resolver=ranking or _Ranking(),
    )


class TestMergeRecords:

    def test_hit_values_win_when_present(self):
        """Test non-empty database values override the PDF guess."""
        hit = MetadataRecord(source=MetadataSource.CROSSREF, title="Deep learning for cats",
                             authors=["Doe, Jane", "Roe, Rick"], year=2020, journal="Feline Review",
                             doi="10.1000/crossref", type='journal-article', volume='3')

        merged = merge_records(_guess(), hit, "Q2 Journal")

        assert merged.source == MetadataSource.CROSSREF
        assert merged.title == "Deep learning for cats"
        assert merged.authors == ["Doe, Jane", "Roe, Rick"]
        assert merged.year == 2020
        assert merged.journal == "Feline Review"
        assert merged.doi == "10.1000/crossref"
        assert merged.volume == '3'
        assert merged.type == "Journal Article"
        assert merged.journal_ranking == "Q2 Journal"

    def test_empty_hit_values_fall_back_to_pdf(self):
        """Test empty database values fall back to the PDF guess."""
        hit = MetadataRecord(source=MetadataSource.OPENALEX, title="Deep learning for cats",
                             authors=[], year=None, journal='', abstract='', doi='', type='posted-content')

        merged = merge_records(_guess(), hit)

        assert merged.authors == ["Jane Doe"]
        assert merged.year == 2019
        assert merged.journal == "Cat Journal"
        assert merged.abstract == "From the PDF."
        assert merged.doi == "10.1000/pdf"
        assert merged.type == "Preprint"
        assert merged.source == MetadataSource.OPENALEX

    def test_inputs_not_modified(self):
        """Test merging leaves both input records unchanged."""
        guess = _guess()
        hit = MetadataRecord(source=MetadataSource.CROSSREF, title="Other title entirely")
        merge_records(guess, hit)
        assert guess.title == "Deep Learning for Cats"
        assert hit.authors == []


class TestReconcile:

    def test_short_title_skips_search(self):
        """Test a title of ten characters or fewer is not searched."""
        search = _Search(MetadataRecord(source=MetadataSource.CROSSREF, title="x"))
        guess = _guess(title="Ten chars!")

        result = _pipeline(search).reconcile(guess)

        assert result is guess
        assert search.titles == []

    def test_no_hit_returns_guess(self):
        """Test the guess is returned unranked when no database matches."""
        search = _Search()
        ranking = _Ranking("Q1 Journal")
        guess = _guess()

        result = _pipeline(search, ranking).reconcile(guess)

        assert result is guess
        assert search.titles == ["Deep Learning for Cats"]
        assert ranking.journals == []

    def test_hit_is_ranked_and_merged(self):
        """Test a database hit is ranked by journal and merged."""
        hit = MetadataRecord(source=MetadataSource.SEMANTIC_SCHOLAR, title="Deep Learning for Cats",
                             journal='', type='Conference')
        ranking = _Ranking("Q3 Journal")

        result = _pipeline(_Search(hit), ranking).reconcile(_guess())

        assert ranking.journals == ["Cat Journal"]
        assert result.journal_ranking == "Q3 Journal"
        assert result.type == "Conference Paper"
        assert result.source == MetadataSource.SEMANTIC_SCHOLAR

    def test_no_journal_means_no_ranking(self):
        """Test no ranking lookup happens without a journal name."""
        hit = MetadataRecord(source=MetadataSource.CROSSREF, title="Deep Learning for Cats", journal='')
        ranking = _Ranking("Q1 Journal")

        result = _pipeline(_Search(hit), ranking).reconcile(_guess(journal='  '))

        assert ranking.journals == []
        assert result.journal_ranking is None


class TestExtractPdfMetadata:

    def test_unreadable_pdf_gives_empty_record(self, tmp_path):
        """Test an unreadable PDF yields the empty default record."""
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"this is not a pdf")
        search = _Search()

        record = _pipeline(search).extract_pdf_metadata(broken)

        assert record.source == MetadataSource.PDF_HEURISTIC
        assert record.title == ''
        assert record.authors == []
        assert record.year == 2024
        assert record.doi == ''
        assert search.titles == []

    def test_missing_file_gives_empty_record(self, tmp_path):
        """Test a missing file yields the empty default record."""
        record = _pipeline().extract_pdf_metadata(tmp_path / "missing.pdf")
        assert record == MetadataRecord.empty(2024)

    def test_end_to_end_with_database_hit(self, monkeypatch, tmp_path):
        """Test text extraction, search, ranking and merge together."""
        raw = RawDocumentText(
            pages=["Graph Methods for Literature Review\nby Jane Doe, John Smith.\n"
                   "Abstract: We review graphs.\n\nIntroduction"],
            info={},
        )
        read_calls = []

        def fake_read(path, max_pages=3):
            read_calls.append((path, max_pages))
            return raw

        monkeypatch.setattr(pdf_metadata, 'read_pdf_text', fake_read)
        hit = MetadataRecord(source=MetadataSource.CROSSREF, title="Graph Methods for Literature Review",
                             authors=["Doe, Jane"], year=2023, journal="Nature Communications",
                             doi="10.1000/graph", type='posted-content')
        ranking = _Ranking("Q1 Journal")
        pipeline = _pipeline(_Search(hit), ranking)

        record = pipeline.extract_pdf_metadata(tmp_path / "paper.pdf")

        assert read_calls == [(tmp_path / "paper.pdf", 3)]
        assert record.source == MetadataSource.CROSSREF
        assert record.authors == ["Doe, Jane"]
        assert record.year == 2023
        assert record.abstract == "We review graphs."
        assert record.type == "Preprint"
        assert record.journal_ranking == "Q1 Journal"
        assert ranking.journals == ["Nature Communications"]

    def test_heuristics_only_when_no_hit(self, monkeypatch, tmp_path):
        """Test the heuristic record is returned when nothing matches."""
        raw = RawDocumentText(pages=["Graph Methods for Literature Review\nPublished 2021"], info={})
        monkeypatch.setattr(pdf_metadata, 'read_pdf_text', lambda path, max_pages=3: raw)

        record = _pipeline().extract_pdf_metadata(tmp_path / "paper.pdf")

        assert record.source == MetadataSource.PDF_HEURISTIC
        assert record.title == "Graph Methods for Literature Review"
        assert record.year == 2021
        assert record.journal_ranking is None


class _ExplodingRanking:
    def get_journal_ranking_tag(self, journal):
        raise RuntimeError("ranking exploded")


class _ExplodingSearch:
    def search_academic_databases(self, title):
        raise RuntimeError("search exploded")


class TestPipelineNeverRaises:

    def _raw(self, monkeypatch):
        raw = RawDocumentText(pages=["Graph Methods for Literature Review\nPublished 2021"], info={})
        monkeypatch.setattr(pdf_metadata, 'read_pdf_text', lambda path, max_pages=3: raw)

    def test_ranking_error_keeps_heuristic_record(self, monkeypatch, tmp_path):
        """Test a failing ranking lookup falls back to the PDF-derived record."""
        self._raw(monkeypatch)
        hit = MetadataRecord(source=MetadataSource.CROSSREF, title="Graph Methods for Literature Review",
                             journal="Feline Review", year=2023)
        pipeline = _pipeline(_Search(hit), _ExplodingRanking())

        record = pipeline.extract_pdf_metadata(tmp_path / "paper.pdf")

        assert record.source == MetadataSource.PDF_HEURISTIC
        assert record.title == "Graph Methods for Literature Review"
        assert record.year == 2021

    def test_search_error_keeps_heuristic_record(self, monkeypatch, tmp_path):
        """Test a failing database search falls back to the PDF-derived record."""
        self._raw(monkeypatch)
        pipeline = PDFMetadataExtractor(
            heuristics=TextHeuristicsExtractor(current_year=2024),
            academic_search=_ExplodingSearch(),
            ranking_resolver=_Ranking(),
        )

        record = pipeline.extract_pdf_metadata(tmp_path / "paper.pdf")

        assert record.source == MetadataSource.PDF_HEURISTIC
        assert record.year == 2021
