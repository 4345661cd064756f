import json
import logging
import os
from typing import Any, Dict, List

import requests

from carescape import defaults

logger = logging.getLogger(__name__)


def _as_record_list(payload: Any, source: str) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        logger.error(f"Expected a list of color records from {source}, got {type(payload).__name__}")
        return []
    records = [record for record in payload if isinstance(record, dict)]
    if len(records) != len(payload):
        logger.warning(
            f"Ignored {len(payload) - len(records)} entries from {source} that are not objects"
        )
    return records


def fetch_colors(
    url: str = defaults.COLORS_API_URL,
    timeout: float = defaults.REQUEST_TIMEOUT_SECONDS,
) -> List[Dict[str, Any]]:
    """
    Fetches the color catalogue from the colors REST endpoint.

    Args:
        url: URL of the ``GET /api/colors`` endpoint
        timeout: Request timeout in seconds

    Returns:
        The color records, or an empty list when the request fails
    """
    headers = {
        "Accept": "application/json",
        "User-Agent": "CareScape/1.0",
    }

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Error fetching colors from {url}: {e}")
        return []
    except ValueError as e:
        logger.error(f"Colors endpoint {url} returned invalid JSON: {e}")
        return []

    return _as_record_list(payload, url)


def load_colors_file(path: str) -> List[Dict[str, Any]]:
    """
    Loads color records from a JSON dump of the colors endpoint.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return _as_record_list(payload, path)
