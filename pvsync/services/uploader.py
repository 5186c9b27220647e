"""
Uploader - sends formatted batches to PVOutput over HTTP
"""

import logging

import httpx

from pvsync.core.exceptions import ProtocolError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://pvoutput.org/service/r2/addbatchstatus.jsp"

HEADER_SYSTEM_ID = "X-Pvoutput-SystemId"
HEADER_API_KEY = "X-Pvoutput-Apikey"


def _header_value(name: str, value: str) -> str:
    """Validate a header value: non-empty printable ASCII."""
    if not value:
        raise ProtocolError(f"Header {name} is empty")
    if not all(" " <= ch <= "~" for ch in value):
        raise ProtocolError(f"Header {name} contains invalid characters")
    return value


class PVOutputUploader:
    """Posts addbatchstatus requests with a shared HTTP client."""

    def __init__(self, client: httpx.Client, url: str = DEFAULT_URL):
        self.client = client
        self.url = url

    def send(self, payload: str, system_id: str, api_key: str) -> int:
        """
        Post one batch to PVOutput.

        Args:
            payload: Form body built by format_batch ("c1=2&data=...")
            system_id: PVOutput system the batch belongs to
            api_key: PVOutput API key

        Returns:
            HTTP status code of the response (not interpreted)
        """
        headers = {
            HEADER_SYSTEM_ID: _header_value(HEADER_SYSTEM_ID, system_id),
            HEADER_API_KEY: _header_value(HEADER_API_KEY, api_key),
            "Content-Type": "application/x-www-form-urlencoded",
        }

        try:
            response = self.client.post(self.url, content=payload.encode("ascii"), headers=headers)
        except UnicodeEncodeError as e:
            raise ProtocolError(f"Payload is not ASCII: {e}") from e
        except httpx.LocalProtocolError as e:
            raise ProtocolError(f"Cannot build request for system {system_id}: {e}") from e
        except httpx.TransportError as e:
            raise TransportError(f"Request to {self.url} failed: {e}", endpoint=self.url) from e

        # non-2xx statuses are judged and logged by the caller
        if response.is_success:
            logger.info(f"HTTP {response.status_code} (system {system_id})")
        logger.debug(f"PVOutput response {response.status_code}: {response.text.strip()[:200]}")
        return response.status_code
