#!/usr/bin/env python3
"""
Journal quartile ranking (Q1-Q4).

Sources, in order, stopping at the first that gives a tier:
- a curated table of well-known journals (exact, then substring match)
- OpenAlex source statistics (2-year mean citedness, then h-index)
- name-pattern heuristics

The substring fallback over the curated table returns the first entry in
table order that matches, not the longest one, so a short generic key
(e.g. "science") can win over a more specific later entry.
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Union

from ..api.openalex_client import OpenAlexClient
from ..models.reference import JournalTier


# Curated sample of known rankings; order matters for substring matching
KNOWN_JOURNAL_RANKINGS: Dict[str, JournalTier] = {
    # Computer science and AI
    'nature': JournalTier.Q1,
    'science': JournalTier.Q1,
    'nature machine intelligence': JournalTier.Q1,
    'nature communications': JournalTier.Q1,
    'journal of machine learning research': JournalTier.Q1,
    'ieee transactions on pattern analysis and machine intelligence': JournalTier.Q1,
    'international journal of computer vision': JournalTier.Q1,
    'artificial intelligence': JournalTier.Q1,
    'neural computation': JournalTier.Q1,
    'acm computing surveys': JournalTier.Q1,
    'ieee transactions on neural networks and learning systems': JournalTier.Q1,
    'neural networks': JournalTier.Q1,
    'machine learning': JournalTier.Q1,

    # Medicine
    'lancet': JournalTier.Q1,
    'new england journal of medicine': JournalTier.Q1,
    'jama': JournalTier.Q1,
    'british medical journal': JournalTier.Q1,
    'plos medicine': JournalTier.Q1,

    # General science
    'proceedings of the national academy of sciences': JournalTier.Q1,
    'scientific reports': JournalTier.Q2,
    'plos one': JournalTier.Q2,

    # Engineering
    'ieee access': JournalTier.Q2,
    'sensors': JournalTier.Q2,
    'applied sciences': JournalTier.Q3,
}

Q1_NAME_PATTERNS = [
    'nature', 'science', 'cell', 'lancet', 'jama',
    'new england journal', 'pnas', 'proceedings of the national academy',
    'annual review', 'ieee transactions on pattern analysis',
    'acm computing surveys', 'journal of machine learning research',
    'communications of the acm', 'artificial intelligence',
]

Q2_NAME_PATTERNS = [
    'ieee transactions', 'acm transactions',
    'international journal', 'journal of',
    'european journal', 'american journal',
]

# Fewer works than this and the citedness statistic is too noisy to trust
MIN_WORKS_FOR_CITEDNESS = 100

CITEDNESS_THRESHOLDS = [(3.0, JournalTier.Q1), (1.5, JournalTier.Q2), (0.5, JournalTier.Q3)]
H_INDEX_THRESHOLDS = [(100, JournalTier.Q1), (50, JournalTier.Q2), (20, JournalTier.Q3)]

MIN_JOURNAL_NAME_LENGTH = 3


def normalize_journal_name(name: str) -> str:
    """Lowercase, drop a leading "the", punctuation and extra whitespace."""
    normalized = name.lower().strip()
    normalized = re.sub(r'^the\s+', '', normalized)
    normalized = re.sub(r'[^\w\s]', '', normalized)
    return re.sub(r'\s+', ' ', normalized).strip()


def _tier_from_thresholds(value: float, thresholds) -> JournalTier:
    for minimum, tier in thresholds:
        if value >= minimum:
            return tier
    return JournalTier.Q4


class JournalRankingResolver:
    """Resolve a journal name to a quartile tier."""

    def __init__(self, openalex: Optional[OpenAlexClient] = None,
                 rankings_file: Optional[Union[str, Path]] = None):
        """
        Initialize the resolver.

        Args:
            openalex: Client used for the bibliometric lookup
            rankings_file: Optional JSON file of extra {journal: tier} entries,
                appended after the built-in table
        """
        self.logger = logging.getLogger(__name__)
        self.openalex = openalex or OpenAlexClient()
        self.known_rankings: Dict[str, JournalTier] = dict(KNOWN_JOURNAL_RANKINGS)
        if rankings_file:
            self._load_rankings_file(Path(rankings_file))

    def _load_rankings_file(self, path: Path):
        """Append curated entries from a JSON file; unreadable files are skipped."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                entries = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not load journal rankings from {path}: {e}")
            return

        added = 0
        for journal, tier in entries.items():
            try:
                key = normalize_journal_name(journal)
                if key and key not in self.known_rankings:
                    self.known_rankings[key] = JournalTier(str(tier).upper())
                    added += 1
            except ValueError:
                self.logger.warning(f"Ignoring invalid tier {tier!r} for {journal!r}")
        self.logger.info(f"Loaded {added} journal rankings from {path}")

    def ranking_from_table(self, journal_name: str) -> Optional[JournalTier]:
        """Exact match on the normalized name, then first substring match."""
        normalized = normalize_journal_name(journal_name)
        if not normalized:
            return None

        if normalized in self.known_rankings:
            tier = self.known_rankings[normalized]
            self.logger.debug(f"Found exact match in database: {normalized} -> {tier.value}")
            return tier

        for known_journal, tier in self.known_rankings.items():
            if known_journal in normalized or normalized in known_journal:
                self.logger.debug(f"Found partial match in database: {known_journal} -> {tier.value}")
                return tier

        return None

    def ranking_from_openalex(self, journal_name: str) -> Optional[JournalTier]:
        """Tier from OpenAlex summary statistics of the top matching source."""
        try:
            journal = self.openalex.search_sources(journal_name)
            if not isinstance(journal, dict):
                return None
            return self.tier_from_source_stats(journal)
        except Exception as e:
            self.logger.error(f"OpenAlex journal lookup failed for {journal_name!r}: {e}")
            return None

    @staticmethod
    def tier_from_source_stats(journal: Dict) -> Optional[JournalTier]:
        """Derive a tier from an OpenAlex source object.

        The 2-year mean citedness is only trusted for venues with more than
        100 works; otherwise the h-index is used if present.
        """
        summary_stats = journal.get('summary_stats') or {}
        citedness = summary_stats.get('2yr_mean_citedness')
        works_count = journal.get('works_count') or 0

        if citedness is not None and works_count > MIN_WORKS_FOR_CITEDNESS:
            return _tier_from_thresholds(float(citedness), CITEDNESS_THRESHOLDS)

        h_index = summary_stats.get('h_index')
        if h_index is not None:
            return _tier_from_thresholds(float(h_index), H_INDEX_THRESHOLDS)

        return None

    @staticmethod
    def ranking_from_heuristics(journal_name: str) -> Optional[JournalTier]:
        """Q1 venue fragments first, then generic Q2 fragments."""
        name = journal_name.lower()
        for pattern in Q1_NAME_PATTERNS:
            if pattern in name:
                return JournalTier.Q1
        for pattern in Q2_NAME_PATTERNS:
            if pattern in name:
                return JournalTier.Q2
        return None

    def get_journal_ranking(self, journal_name: Optional[str]) -> Optional[str]:
        """
        Get journal quartile ranking.

        Args:
            journal_name: Name of the journal

        Returns:
            "Q1".."Q4" or None
        """
        if not journal_name or len(journal_name.strip()) < MIN_JOURNAL_NAME_LENGTH:
            return None

        journal_name = journal_name.strip()
        self.logger.info(f"Getting journal ranking for: {journal_name}")

        lookups = [
            ('database', self.ranking_from_table),
            ('OpenAlex', self.ranking_from_openalex),
            ('heuristics', self.ranking_from_heuristics),
        ]
        for label, lookup in lookups:
            tier = lookup(journal_name)
            if tier:
                self.logger.info(f"Found ranking from {label}: {tier.value}")
                return tier.value

        self.logger.info(f"No ranking found for journal: {journal_name}")
        return None

    def get_journal_ranking_tag(self, journal_name: Optional[str]) -> Optional[str]:
        """Ranking formatted as a tag, e.g. "Q1 Journal"."""
        ranking = self.get_journal_ranking(journal_name)
        return JournalTier(ranking).tag if ranking else None
