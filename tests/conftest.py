"""
Shared fakes for HTTP sessions and lookup clients.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, reason: str = ''):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays queued responses in order.

    A queued exception instance is raised instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.headers = {}
        self.calls = []

    def _next(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, params=None, timeout=None, **kwargs):
        return self._next('GET', url, params=params, timeout=timeout, **kwargs)

    def post(self, url, json=None, headers=None, timeout=None, **kwargs):
        return self._next('POST', url, json=json, headers=headers, timeout=timeout, **kwargs)
