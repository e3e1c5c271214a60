"""
Local persistence: a JSON key-value blob store and a PDF blob store.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union


class KeyValueStore:
    """Whole-file JSON store keyed by string.

    Every write rewrites the file through a temporary file and an atomic
    rename, so a crash leaves either the old or the new contents.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Could not read store {self.path}: {e}")
            raise
        if not isinstance(data, dict):
            raise ValueError(f"Store {self.path} does not contain a JSON object")
        return data

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix='.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value
        self._save()

    def delete(self, key: str):
        if key in self._data:
            del self._data[key]
            self._save()

    def keys(self):
        return list(self._data.keys())


class PDFStore:
    """Stores PDF files as ``<id>.pdf`` with a JSON sidecar of file details."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.logger = logging.getLogger(__name__)

    def _blob_path(self, pdf_id: str) -> Path:
        if not pdf_id or '/' in pdf_id or '\\' in pdf_id or pdf_id.startswith('.'):
            raise ValueError(f"Invalid PDF id: {pdf_id!r}")
        return self.directory / f"{pdf_id}.pdf"

    def _info_path(self, pdf_id: str) -> Path:
        return self._blob_path(pdf_id).with_suffix('.json')

    def save_pdf(self, pdf_id: str, source_path: Union[str, Path]) -> str:
        """Copy a PDF into the store.

        Args:
            pdf_id: Identifier to store it under
            source_path: PDF to copy

        Returns:
            The pdf_id
        """
        source_path = Path(source_path)
        self.directory.mkdir(parents=True, exist_ok=True)
        blob = self._blob_path(pdf_id)
        shutil.copyfile(source_path, blob)

        info = {'id': pdf_id, 'name': source_path.name, 'size': blob.stat().st_size}
        with open(self._info_path(pdf_id), 'w', encoding='utf-8') as f:
            json.dump(info, f, indent=2, ensure_ascii=False)

        self.logger.debug(f"Stored PDF {source_path.name} as {blob.name}")
        return pdf_id

    def get_pdf_path(self, pdf_id: str) -> Optional[Path]:
        blob = self._blob_path(pdf_id)
        return blob if blob.exists() else None

    def get_pdf_info(self, pdf_id: str) -> Optional[Dict[str, Any]]:
        info_path = self._info_path(pdf_id)
        if not info_path.exists():
            return None
        with open(info_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def delete_pdf(self, pdf_id: str):
        for path in (self._blob_path(pdf_id), self._info_path(pdf_id)):
            if path.exists():
                path.unlink()
