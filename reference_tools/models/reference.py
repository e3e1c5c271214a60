"""
Data models for bibliographic references.
"""
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


class MetadataSource(Enum):
    """Where a metadata record came from."""
    CROSSREF = "CrossRef"
    OPENALEX = "OpenAlex"
    SEMANTIC_SCHOLAR = "SemanticScholar"
    PDF_HEURISTIC = "PDFHeuristic"


class PublicationType(Enum):
    """Reference types shown to the user."""
    JOURNAL_ARTICLE = "Journal Article"
    CONFERENCE_PAPER = "Conference Paper"
    BOOK_CHAPTER = "Book Chapter"
    THESIS = "Thesis"
    TECHNICAL_REPORT = "Technical Report"
    PREPRINT = "Preprint"


class JournalTier(Enum):
    """Coarse journal quality classification, Q1 highest."""
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    @property
    def tag(self) -> str:
        return f"{self.value} Journal"


@dataclass
class RawDocumentText:
    """Text of the first pages of a PDF plus its embedded info dictionary."""
    pages: List[str] = field(default_factory=list)
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def full_text(self) -> str:
        return '\n'.join(self.pages)


@dataclass
class MetadataRecord:
    """Common shape produced by every lookup source and the PDF heuristics."""
    source: MetadataSource
    title: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    year: Optional[int] = None
    journal: Optional[str] = None
    abstract: Optional[str] = None
    doi: Optional[str] = None
    type: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    publisher: Optional[str] = None
    url: Optional[str] = None
    issn: Optional[str] = None
    isbn: Optional[str] = None
    language: Optional[str] = None
    reference_count: Optional[int] = None
    citation_count: Optional[int] = None
    journal_ranking: Optional[str] = None

    @classmethod
    def empty(cls, current_year: Optional[int] = None) -> 'MetadataRecord':
        """Default record returned when a document cannot be read at all."""
        return cls(
            source=MetadataSource.PDF_HEURISTIC,
            title='',
            authors=[],
            year=current_year or datetime.now().year,
            journal='',
            abstract='',
            doi='',
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['source'] = self.source.value
        return data


@dataclass
class SearchPage:
    """One page of keyword search results."""
    query: str
    records: List[MetadataRecord] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 20
    year: Optional[str] = None

    @property
    def next_offset(self) -> int:
        return self.offset + self.limit

    @property
    def has_more(self) -> bool:
        return bool(self.records) and self.total > self.next_offset


# Fields a Reference shares with MetadataRecord (everything but the provenance)
BIBLIOGRAPHIC_FIELDS = [
    f.name for f in fields(MetadataRecord)
    if f.name not in ('source', 'journal_ranking')
]

# Set once when a reference is created
IMMUTABLE_FIELDS = ('id', 'date_added')


@dataclass
class Reference:
    """A user-owned reference in the local library."""
    id: str
    title: str = ''
    authors: List[str] = field(default_factory=list)
    year: Optional[int] = None
    journal: str = ''
    abstract: str = ''
    doi: str = ''
    type: str = PublicationType.JOURNAL_ARTICLE.value
    volume: str = ''
    issue: str = ''
    pages: str = ''
    publisher: str = ''
    url: str = ''
    issn: str = ''
    isbn: str = ''
    language: str = ''
    reference_count: Optional[int] = None
    citation_count: Optional[int] = None
    source: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    collection_ids: List[str] = field(default_factory=list)
    favorite: bool = False
    notes: str = ''
    pdf_id: Optional[str] = None
    date_added: str = field(default_factory=lambda: datetime.now().isoformat())

    def apply_updates(self, **updates) -> None:
        """Update fields in place. `id` and `date_added` cannot change."""
        known = {f.name for f in fields(self)}
        for key, value in updates.items():
            if key in IMMUTABLE_FIELDS:
                raise ValueError(f"Field '{key}' cannot be modified")
            if key not in known:
                raise ValueError(f"Unknown reference field: {key}")
            setattr(self, key, value)
        self.tags = _unique(self.tags)
        self.collection_ids = _unique(self.collection_ids)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Reference':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _unique(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items or []:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
