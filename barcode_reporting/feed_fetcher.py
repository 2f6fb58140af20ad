"""
Feed Fetcher Module (READ-ONLY)

Fetches the scanner feed with a single HTTP GET. Any failure - network error,
non-success status, malformed JSON - is logged and degrades to an empty record list,
so a broken feed means "no data today" rather than a crashed run.

No retry, pagination or streaming; the next scheduled run is the retry.
"""

from typing import List

import requests

from barcode_reporting.config import DEFAULT_FEED_TIMEOUT
from barcode_reporting.data_preprocessor import records_from_payload
from barcode_reporting.models import ScanRecord
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = "daily-barcode-report/1.0"


def fetch_scan_records(url: str, timeout: int = DEFAULT_FEED_TIMEOUT) -> List[ScanRecord]:
    """
    Fetch the scanner feed and return its records in feed order.

    Args:
        url: Feed endpoint returning a JSON array of scan records
        timeout: Request timeout in seconds

    Returns:
        List of ScanRecord, or an empty list if anything went wrong
    """
    logger.info(f"Fetching scanner feed: {url}")

    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        logger.error(f"Failed to fetch scanner feed: HTTP error {str(e)}")
        return []
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to fetch scanner feed: {str(e)}", exc_info=True)
        return []

    try:
        payload = response.json()
    except ValueError as e:
        logger.error(f"Scanner feed returned malformed JSON: {str(e)}")
        return []

    try:
        records = records_from_payload(payload)
    except ValueError as e:
        logger.error(f"Scanner feed has unexpected shape: {str(e)}")
        return []

    logger.info(f"Fetched {len(records)} items")
    return records
