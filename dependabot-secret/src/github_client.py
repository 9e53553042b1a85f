import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_API_URL = 'https://api.github.com'
GITHUB_API_VERSION = '2022-11-28'

# Methods whose remaining params travel as a JSON body
BODY_METHODS = ('POST', 'PUT', 'PATCH')

PLACEHOLDER = re.compile(r'\{(\w+)\}')


class GitHubAPIError(Exception):
    """Raised when the GitHub API answers with a non-2xx status"""

    def __init__(self, status, message, url=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.url = url


class GitHubResponse:
    """Status, decoded JSON body (None when empty) and headers of a call"""

    def __init__(self, status: int, data: Any = None, headers: Optional[Dict[str, str]] = None):
        self.status = status
        self.data = data
        self.headers = headers or {}

    def __repr__(self):
        return f"GitHubResponse(status={self.status})"


class GitHubClient:
    """
    Minimal authenticated GitHub REST client.

    Every call to execute() issues exactly one HTTP request. Nothing is
    retried: HTTP failures surface as GitHubAPIError and transport failures
    as the original requests exception.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: int = 30):
        self.api_url = (api_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self.headers = {
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github+json'
        }

    def execute(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> GitHubResponse:
        """
        Issue one request against an Octokit-style path template.

        Args:
            method: HTTP method (GET, PUT, ...)
            path: Path template such as /repos/{owner}/{repo}
            params: Template values, an optional 'headers' dict, and any
                remaining fields (JSON body for writes, query string otherwise)
        """
        method = method.upper()
        params = dict(params or {})
        headers = dict(self.headers)
        headers.update(params.pop('headers', None) or {})

        url = self.api_url + self._expand(path, params)

        kwargs = {'headers': headers, 'timeout': self.timeout}
        if method in BODY_METHODS:
            kwargs['json'] = params
        elif params:
            kwargs['params'] = params

        logger.info(f"{method} {url}")
        response = requests.request(method, url, **kwargs)

        if not 200 <= response.status_code < 300:
            message = self._error_message(response)
            logger.error(f"GitHub API error: {response.status_code} - {message}")
            raise GitHubAPIError(response.status_code, message, url)

        data = None
        content_type = response.headers.get('Content-Type', '')
        if response.status_code != 204 and response.content and 'json' in content_type:
            data = response.json()

        return GitHubResponse(response.status_code, data, dict(response.headers))

    @staticmethod
    def _expand(path, params):
        """Fill {placeholders} from params, consuming the values used"""
        def substitute(match):
            name = match.group(1)
            if name not in params:
                raise KeyError(f"Missing value for path parameter '{name}'")
            return quote(str(params.pop(name)), safe='')

        return PLACEHOLDER.sub(substitute, path)

    @staticmethod
    def _error_message(response):
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get('message'):
            return body['message']
        return response.reason or response.text or f'HTTP {response.status_code}'
