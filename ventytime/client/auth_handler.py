"""Bearer Auth Handler — httpx.Auth that attaches the stored JWT to every request.

Invariants:
    - No token stored → request sent without Authorization
    - A 401 response to an authenticated request clears the stored token
"""

import logging
from collections.abc import Generator

import httpx

from ventytime.client.token_store import TokenStore

logger = logging.getLogger(__name__)


class BearerAuth(httpx.Auth):

    def __init__(self, store: TokenStore):
        self.store = store

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self.store.get_token()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if token and response.status_code == 401:
            logger.warning("Unauthorized response, clearing stored token")
            self.store.clear()
