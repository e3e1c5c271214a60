#!/usr/bin/env python3
"""
Chat-completion client that turns paper text into structured review fields.

Models are tried in order: a model that is unavailable (HTTP 400/404) or
that returns no usable JSON is skipped, while a rejected API key (HTTP 401)
stops immediately because no other model can fix it.
"""

import json
import logging
import requests
from typing import Dict, List, Optional


DEFAULT_BASE_URL = "https://api.cerebras.ai/v1"
DEFAULT_MODELS = ["llama-3.3-70b", "llama3.1-70b", "llama3.1-8b"]

MAX_PAPER_CHARS = 30000
MAX_QUERY_LENGTH = 200

REVIEW_FIELDS = {
    'summary': 'A concise summary of the paper (max 150 words).',
    'researchQuestion': 'The main problem or research question being addressed.',
    'methodology': 'The methods, algorithms, or approaches used.',
    'dataset': 'The datasets used for training or evaluation.',
    'metrics': 'The evaluation metrics used.',
    'keyFindings': 'The main results, discoveries, or conclusions.',
    'majorResults': 'The key quantitative or qualitative results.',
    'comparison': 'How the proposed method compares to baselines or state-of-the-art.',
    'strengths': 'The strong points of the paper.',
    'weaknesses': 'The limitations or weak points.',
    'contributions': 'How this paper advances the field.',
    'futureWork': 'Suggested future research directions mentioned in the paper.',
    'rating': 'An integer rating from 1 to 5 based on the quality and impact of the paper.',
}

SYSTEM_PROMPT = (
    "You are a precise annotator for academic papers. "
    "Analyze the paper and return structured JSON data."
)


class SummarizerError(Exception):
    """Summarization failed with every model."""


class InvalidCredentialError(SummarizerError):
    """The API key was rejected."""


class ModelUnavailableError(SummarizerError):
    """The requested model does not exist or rejected the request."""


def extract_json_object(text: str) -> Optional[Dict]:
    """Return the first complete JSON object found anywhere in text.

    Args:
        text: Model output that may wrap JSON in prose or markdown fences

    Returns:
        Parsed object or None if no '{' starts a valid JSON object
    """
    decoder = json.JSONDecoder()
    start = text.find('{')
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
            if isinstance(obj, dict):
                return obj
        except json.JSONDecodeError:
            pass
        start = text.find('{', start + 1)
    return None


class PaperSummarizer:
    """Multi-model chat-completion client for paper review extraction."""

    def __init__(self, api_key: Optional[str], models: Optional[List[str]] = None,
                 base_url: str = DEFAULT_BASE_URL, timeout: int = 120,
                 session: Optional[requests.Session] = None):
        """Initialize the summarizer.

        Args:
            api_key: Bearer key supplied by the caller
            models: Model identifiers in the order to try
            base_url: Chat-completion API root
            timeout: Timeout in seconds per request
            session: Preconfigured requests session (optional)
        """
        self.api_key = api_key
        self.models = list(models or DEFAULT_MODELS)
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def _build_review_prompt(self, text: str) -> str:
        field_lines = '\n'.join(f"- {key}: {description}" for key, description in REVIEW_FIELDS.items())
        return (
            "You are an expert academic reviewer. Analyze the following academic paper text "
            "and extract the key technical details.\n\n"
            "Return the result ONLY as a valid JSON object with the following keys:\n"
            f"{field_lines}\n\n"
            "If a field cannot be found, return an empty string for it. Do not include any "
            "markdown formatting in the response, just the raw JSON string.\n\n"
            f"Paper Text:\n{text[:MAX_PAPER_CHARS]}"
        )

    def _complete(self, model: str, system_prompt: str, user_prompt: str,
                  temperature: float, max_tokens: int) -> str:
        """Run one chat completion and return the message content.

        Raises:
            InvalidCredentialError: HTTP 401
            ModelUnavailableError: HTTP 400 or 404
            SummarizerError: any other failure
        """
        payload = {
            'model': model,
            'messages': [
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': user_prompt},
            ],
            'temperature': temperature,
            'top_p': 0.95,
            'max_tokens': max_tokens,
            'stream': False,
        }
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
        }

        try:
            response = self.session.post(f"{self.base_url}/chat/completions",
                                         json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise SummarizerError(f"Request to {model} failed: {e}") from e

        if response.status_code == 401:
            raise InvalidCredentialError(f"API key invalid: {_error_message(response)}")
        if response.status_code in (400, 404):
            raise ModelUnavailableError(f"Model {model} not available")
        if response.status_code != 200:
            raise SummarizerError(f"API error {response.status_code}: {_error_message(response)}")

        try:
            data = response.json()
            content = data['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise SummarizerError(f"Empty response from {model}")
        return content

    def summarize(self, text: str) -> Dict:
        """Extract structured review fields from paper text.

        Args:
            text: Full text of the paper

        Returns:
            Parsed JSON object from the first model that answers usefully

        Raises:
            InvalidCredentialError: the key was rejected
            SummarizerError: no key given, or every model failed
        """
        if not self.api_key:
            raise SummarizerError("API key is required")

        prompt = self._build_review_prompt(text)
        last_error: Optional[Exception] = None

        for model in self.models:
            self.logger.info(f"Attempting to call model: {model}")
            try:
                content = self._complete(model, SYSTEM_PROMPT, prompt, temperature=0.6, max_tokens=4096)
            except InvalidCredentialError:
                raise
            except ModelUnavailableError as e:
                self.logger.warning(f"{e}. Trying next...")
                last_error = e
                continue
            except SummarizerError as e:
                self.logger.error(f"Error with model {model}: {e}")
                last_error = e
                continue

            result = extract_json_object(content)
            if result is None:
                last_error = SummarizerError(f"No JSON object found in {model} response")
                self.logger.error(str(last_error))
                continue

            self.logger.info(f"Success with model: {model}")
            return result

        raise SummarizerError(f"Failed to analyze paper with any model. Last error: {last_error}")

    def enhance_search_query(self, query: str) -> str:
        """Augment a search query with related academic terms.

        Returns the original query when no key is set or every model fails.
        """
        if not self.api_key:
            return query

        system_prompt = ("You are an expert at converting natural language queries "
                         "into optimized academic search queries.")
        user_prompt = (
            "Augment the following search query by adding 2-3 related academic terms or "
            "synonyms using the OR operator (|). Return ONLY the augmented query string.\n"
            'Example: "deep learning" -> "deep learning | neural networks | representation learning"\n\n'
            f'Original query: "{query}"\n\nAugmented query:'
        )

        for model in self.models:
            try:
                content = self._complete(model, system_prompt, user_prompt, temperature=0.3, max_tokens=100)
            except SummarizerError as e:
                self.logger.warning(f"Query enhancement failed with {model}: {e}")
                continue

            enhanced = content.strip()
            if 0 < len(enhanced) < MAX_QUERY_LENGTH:
                return enhanced
            return query

        return query


def _error_message(response) -> str:
    try:
        return (response.json().get('error') or {}).get('message') or response.reason or ''
    except (ValueError, AttributeError):
        return getattr(response, 'reason', '') or ''
