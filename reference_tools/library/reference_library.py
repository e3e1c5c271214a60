"""
The local reference library: creation, edits, collections, PDF ingestion.
"""
import logging
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import dateutil.parser

from .storage import KeyValueStore, PDFStore
from ..api.crossref_client import CrossRefClient
from ..metadata.academic_search import map_publication_type
from ..metadata.pdf_metadata import PDFMetadataExtractor
from ..models.reference import (
    BIBLIOGRAPHIC_FIELDS, MetadataRecord, PublicationType, Reference,
)


REFERENCES_KEY = 'references'
COLLECTIONS_KEY = 'collections'

PUBLICATION_TYPES = {t.value for t in PublicationType}


def new_id() -> str:
    return uuid.uuid4().hex


class ReferenceLibrary:
    """References and collections persisted in a KeyValueStore.

    Newest references come first. Each mutation is written through to the
    store immediately.
    """

    def __init__(self, store: KeyValueStore, pdf_store: Optional[PDFStore] = None,
                 extractor: Optional[PDFMetadataExtractor] = None,
                 crossref: Optional[CrossRefClient] = None):
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.pdf_store = pdf_store
        self.extractor = extractor
        self.crossref = crossref
        self.references: List[Reference] = [
            Reference.from_dict(data) for data in store.get(REFERENCES_KEY, [])
        ]
        self.collections: List[Dict[str, str]] = list(store.get(COLLECTIONS_KEY, []))

    def _save_references(self):
        self.store.set(REFERENCES_KEY, [ref.to_dict() for ref in self.references])

    def _save_collections(self):
        self.store.set(COLLECTIONS_KEY, self.collections)

    # References

    def all(self) -> List[Reference]:
        return list(self.references)

    def get(self, reference_id: str) -> Reference:
        for ref in self.references:
            if ref.id == reference_id:
                return ref
        raise KeyError(f"Reference not found: {reference_id}")

    def add_reference(self, data: Dict[str, Any]) -> Reference:
        """Add a manually entered reference.

        Any ``id``, ``date_added`` or ``favorite`` in data is ignored; the
        library assigns them.
        """
        fields = {k: v for k, v in data.items() if k not in ('id', 'date_added', 'favorite')}
        reference = Reference(id=new_id(), **fields)
        reference.apply_updates()
        self.references.insert(0, reference)
        self._save_references()
        self.logger.info(f"Added reference {reference.id}: {reference.title[:60]}")
        return reference

    def create_from_metadata(self, record: MetadataRecord, pdf_id: Optional[str] = None,
                             fallback_title: str = '', reference_id: Optional[str] = None) -> Reference:
        """Build (but do not store) a reference from pipeline output."""
        values = {name: getattr(record, name) for name in BIBLIOGRAPHIC_FIELDS}
        values = {k: v for k, v in values.items() if v is not None}

        values['title'] = record.title or fallback_title
        values['year'] = record.year or datetime.now().year
        values['type'] = (record.type if record.type in PUBLICATION_TYPES
                          else map_publication_type(record.type))

        return Reference(
            id=reference_id or new_id(),
            source=record.source.value,
            tags=[record.journal_ranking] if record.journal_ranking else [],
            pdf_id=pdf_id,
            **values,
        )

    def add_record(self, record: MetadataRecord, fallback_title: str = 'Untitled') -> Reference:
        """Store a reference built from a metadata record, e.g. a search result."""
        reference = self.create_from_metadata(record, fallback_title=fallback_title)
        self.references.insert(0, reference)
        self._save_references()
        self.logger.info(f"Added {reference.id} from {reference.source}: {reference.title[:60]}")
        return reference

    def ingest_pdfs(self, paths: Iterable[Union[str, Path]]) -> List[Reference]:
        """Create references for PDFs, one file at a time in the given order.

        A file that fails is logged and skipped; the rest still go in.

        Args:
            paths: PDF files

        Returns:
            References created, in processing order
        """
        if self.extractor is None:
            raise RuntimeError("No metadata extractor configured for PDF ingestion")

        created = []
        for path in paths:
            path = Path(path)
            reference_id = new_id()
            try:
                pdf_id = None
                if self.pdf_store is not None:
                    pdf_id = self.pdf_store.save_pdf(reference_id, path)
                record = self.extractor.extract_pdf_metadata(path)
                reference = self.create_from_metadata(record, pdf_id=pdf_id, fallback_title=path.stem,
                                                      reference_id=reference_id)
            except Exception as e:
                self.logger.error(f"Failed to process file {path.name}: {e}")
                if self.pdf_store is not None:
                    self.pdf_store.delete_pdf(reference_id)
                continue

            self.references.insert(0, reference)
            self._save_references()
            created.append(reference)
            self.logger.info(f"Added {path.name} as {reference.id} ({reference.source})")

        return created

    def update_reference(self, reference_id: str, **updates) -> Reference:
        reference = self.get(reference_id)
        reference.apply_updates(**updates)
        self._save_references()
        return reference

    def toggle_favorite(self, reference_id: str) -> Reference:
        reference = self.get(reference_id)
        return self.update_reference(reference_id, favorite=not reference.favorite)

    def add_tag(self, reference_id: str, tag: str) -> Reference:
        reference = self.get(reference_id)
        return self.update_reference(reference_id, tags=reference.tags + [tag])

    def remove_tag(self, reference_id: str, tag: str) -> Reference:
        reference = self.get(reference_id)
        return self.update_reference(reference_id, tags=[t for t in reference.tags if t != tag])

    def delete_reference(self, reference_id: str):
        reference = self.get(reference_id)
        self.references.remove(reference)
        if reference.pdf_id and self.pdf_store is not None:
            self.pdf_store.delete_pdf(reference.pdf_id)
        self._save_references()
        self.logger.info(f"Deleted reference {reference_id}")

    def refresh_from_doi(self, reference_id: str,
                         crossref: Optional[CrossRefClient] = None) -> Optional[Reference]:
        """Refill a reference's bibliographic fields from CrossRef by its DOI.

        CrossRef values win when non-empty; tags, notes, favorite and
        collections are left alone.

        Returns:
            The updated reference, or None if the DOI could not be resolved
        """
        reference = self.get(reference_id)
        crossref = crossref or self.crossref or CrossRefClient()
        record = crossref.get_metadata(reference.doi)
        if record is None:
            self.logger.warning(f"DOI lookup failed for {reference_id}: {reference.doi!r}")
            return None

        updates = {}
        for name in BIBLIOGRAPHIC_FIELDS:
            value = getattr(record, name)
            if value is None or (isinstance(value, (str, list)) and not value):
                continue
            updates[name] = value
        updates['type'] = map_publication_type(record.type)
        updates['source'] = record.source.value
        return self.update_reference(reference_id, **updates)

    def filter_references(self, query: Optional[str] = None, favorites_only: bool = False,
                          recent_days: Optional[int] = None,
                          collection_id: Optional[str] = None) -> List[Reference]:
        """References matching every given criterion.

        The query matches title, authors, tags and abstract, ignoring case.
        """
        cutoff = datetime.now() - timedelta(days=recent_days) if recent_days else None
        needle = query.lower() if query else None

        results = []
        for ref in self.references:
            if collection_id and collection_id not in ref.collection_ids:
                continue
            if favorites_only and not ref.favorite:
                continue
            if cutoff and _added_at(ref) < cutoff:
                continue
            if needle and not _matches(ref, needle):
                continue
            results.append(ref)
        return results

    # Collections

    def add_collection(self, name: str) -> Dict[str, str]:
        collection = {'id': new_id(), 'name': name}
        self.collections.append(collection)
        self._save_collections()
        return collection

    def rename_collection(self, collection_id: str, new_name: str):
        for collection in self.collections:
            if collection['id'] == collection_id:
                collection['name'] = new_name
                self._save_collections()
                return
        raise KeyError(f"Collection not found: {collection_id}")

    def delete_collection(self, collection_id: str):
        """Delete a collection and remove it from every reference."""
        before = len(self.collections)
        self.collections = [c for c in self.collections if c['id'] != collection_id]
        if len(self.collections) == before:
            raise KeyError(f"Collection not found: {collection_id}")

        for ref in self.references:
            if collection_id in ref.collection_ids:
                ref.collection_ids = [c for c in ref.collection_ids if c != collection_id]
        self._save_collections()
        self._save_references()


def _added_at(ref: Reference) -> datetime:
    added = dateutil.parser.isoparse(ref.date_added)
    if added.tzinfo is not None:
        added = added.astimezone().replace(tzinfo=None)
    return added


def _matches(ref: Reference, needle: str) -> bool:
    return (
        needle in (ref.title or '').lower()
        or any(needle in author.lower() for author in ref.authors)
        or any(needle in tag.lower() for tag in ref.tags)
        or needle in (ref.abstract or '').lower()
    )
