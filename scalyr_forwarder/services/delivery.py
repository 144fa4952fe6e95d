"""
HTTP delivery of built requests to Scalyr
"""

import logging
from typing import Optional

import requests

from scalyr_forwarder.errors import TransportError
from scalyr_forwarder.models.messages import HttpResponse, OutgoingRequest

logger = logging.getLogger(__name__)


class HttpSender:
    """POSTs OutgoingRequests with a shared requests session"""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of the HTTP session"""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def send(self, request: OutgoingRequest) -> HttpResponse:
        """
        Send a request and return whatever the server answered

        Raises:
            TransportError: If no response was received
        """
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body.encode('utf-8'),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            if e.response is not None:
                return HttpResponse(
                    status_code=e.response.status_code,
                    body=e.response.text,
                    error=str(e)
                )
            raise TransportError(f"No response from Scalyr: {str(e)}") from e

        return HttpResponse(status_code=response.status_code, body=response.text)
