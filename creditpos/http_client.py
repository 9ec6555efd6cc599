"""
http_client.py - SOAP Transport
================================
This module handles all HTTP communication with the credit-position SOAP
endpoint:
- Posting request envelopes with the fixed SOAPAction and content headers
- HTTP Basic authentication with the credentials from Settings
- Managing the HTTP session

Every call is a single attempt. A network error, a timeout, or a response
outside the 2xx range raises TransportError and is never retried.
"""

import logging

import requests
from requests.auth import HTTPBasicAuth

from .config import Settings
from .errors import TransportError


logger = logging.getLogger(__name__)

# Status codes reported as a credential problem rather than a server fault
AUTH_STATUSES = (401, 403)


# =============================================================================
# SOAP CLIENT CLASS
# =============================================================================

class SoapClient:
    """
    HTTP client for the retrieveCreditPosition SOAP endpoint.

    Usage:
        client = SoapClient(settings)
        response_text = client.send(envelope)
        client.close()
    """

    def __init__(self, settings: Settings):
        """
        Initialize the client.

        Args:
            settings: Configuration object with endpoint, SOAP action,
                credentials and timeout
        """
        self.settings = settings

        # One session for the whole batch: connection reuse between records
        self.s = requests.Session()
        self.s.auth = HTTPBasicAuth(settings.username, settings.password)
        self.s.headers.update({
            "Content-Type": 'text/xml;charset="utf-8"',
            "Accept": "text/xml",
            "SOAPAction": settings.soap_action,
        })

        self.url = settings.endpoint_url
        self.timeout = settings.timeout_sec

    # -------------------------------------------------------------------------
    # REQUEST METHODS
    # -------------------------------------------------------------------------

    def send(self, envelope: str) -> str:
        """
        Post one request envelope and return the raw response text.

        Args:
            envelope: The request document built by build_envelope()

        Returns:
            The response body as a string

        Raises:
            TransportError: On network failure, timeout, authentication
                rejection or any non-2xx status
        """
        try:
            r = self.s.post(
                self.url,
                data=envelope.encode("utf-8"),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise TransportError(
                f"Timed out after {self.timeout}s waiting for {self.url}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"Network error calling {self.url}: {type(e).__name__}: {e}"
            ) from e

        logger.debug(f"POST {self.url} -> {r.status_code} ({len(r.content)} bytes)")

        if r.status_code in AUTH_STATUSES:
            raise TransportError(
                f"Authentication rejected with status {r.status_code}",
                status_code=r.status_code,
            )

        if not 200 <= r.status_code < 300:
            raise TransportError(
                f"Request failed with status {r.status_code}. "
                f"Response: {(r.text or '')[:300]}",
                status_code=r.status_code,
            )

        # requests assumes ISO-8859-1 for text/* without a charset
        if "charset" not in r.headers.get("content-type", "").lower():
            r.encoding = "utf-8"

        return r.text or ""

    # -------------------------------------------------------------------------
    # CLEANUP METHODS
    # -------------------------------------------------------------------------

    def close(self):
        """Close the HTTP session and release its connections."""
        self.s.close()
