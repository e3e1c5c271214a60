"""
Centralized configuration management for reference-tools.

Reads config.conf and then config.personal.conf (personal overrides) from
the repository root. Components never read configuration themselves; the
values are passed in through their constructors (see build_pipeline).
"""
import configparser
from pathlib import Path
from typing import Dict, Any, List, Optional, Union


ROOT_DIR = Path(__file__).parent.parent.parent

DEFAULTS = {
    'APIS': {
        'crossref_api': 'https://api.crossref.org',
        'openalex_api': 'https://api.openalex.org',
        'semantic_scholar_api': 'https://api.semanticscholar.org/graph/v1',
        'contact_email': '',
        'timeout': '10',
    },
    'PROCESSING': {
        'max_pages': '3',
        'journal_rankings_file': '',
        'search_page_size': '20',
    },
    'PATHS': {
        'library_folder': './data/library',
    },
    'AI': {
        'base_url': 'https://api.cerebras.ai/v1',
        'models': 'llama-3.3-70b, llama3.1-70b, llama3.1-8b',
        'api_key': '',
        'timeout': '120',
    },
}


class ConfigManager:
    """Centralized configuration management."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file. If None, reads config.conf
                and config.personal.conf from the repository root.
        """
        self.config = configparser.ConfigParser()
        self.config.read_dict(DEFAULTS)

        if config_file is None:
            self.config_files = [ROOT_DIR / 'config.conf', ROOT_DIR / 'config.personal.conf']
        else:
            self.config_files = [Path(config_file)]

        self.loaded_files = self.config.read([str(p) for p in self.config_files])

    def get(self, section: str, key: str, fallback: Any = None) -> Any:
        """Get configuration value."""
        try:
            return self.config.get(section, key, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getint(self, section: str, key: str, fallback: int = 0) -> int:
        try:
            return self.config.getint(section, key, fallback=fallback)
        except ValueError:
            return fallback

    def get_section(self, section: str) -> Dict[str, str]:
        """Get entire configuration section."""
        try:
            return dict(self.config[section])
        except KeyError:
            return {}

    def get_list(self, section: str, key: str) -> List[str]:
        """Comma-separated value as a list of non-empty items."""
        value = self.get(section, key, '') or ''
        return [item.strip() for item in value.split(',') if item.strip()]

    def set(self, section: str, key: str, value: str):
        """Set configuration value."""
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, key, value)

    def get_api_url(self, service: str) -> str:
        """Base URL for crossref, openalex or semantic_scholar."""
        return self.get('APIS', f'{service}_api', '')

    def get_contact_email(self) -> Optional[str]:
        return self.get('APIS', 'contact_email', '') or None

    def get_timeout(self) -> int:
        return self.getint('APIS', 'timeout', 10)

    def get_max_pages(self) -> int:
        return self.getint('PROCESSING', 'max_pages', 3)

    def get_journal_rankings_file(self) -> Optional[Path]:
        value = self.get('PROCESSING', 'journal_rankings_file', '')
        return self.resolve_path(value) if value else None

    def get_library_folder(self) -> Path:
        return self.resolve_path(self.get('PATHS', 'library_folder', './data/library'))

    def get_ai_models(self) -> List[str]:
        return self.get_list('AI', 'models')

    def resolve_path(self, value: str) -> Path:
        """Relative paths are taken relative to the repository root."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else ROOT_DIR / path
