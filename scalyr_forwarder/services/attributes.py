"""
Server attributes propagated from SERVER_* environment variables into uploadLogs query strings
"""

import logging
import re
import urllib.parse
from typing import List, Mapping, Tuple

from scalyr_forwarder.models.config import SERVER_ATTRIBUTE_PREFIX, SERVER_LOG_STREAM_KEY

logger = logging.getLogger(__name__)

# encodeURIComponent leaves these characters alone
URI_COMPONENT_SAFE = "-_.!~*'()"

WORD_SEPARATORS = re.compile(r'[_\-.\s]+')
QUERY_UNSAFE = re.compile(r'[&=#\s]')


def encode_uri_component(value: str) -> str:
    return urllib.parse.quote(value, safe=URI_COMPONENT_SAFE)


def camel_case(value: str) -> str:
    """
    Convert a separator-delimited key to camelCase

    SERVER-style keys are all uppercase, so they are lowercased before the words
    are joined: LOG_GROUP_OWNER becomes logGroupOwner.
    """
    if value.isupper():
        value = value.lower()

    words = [word for word in WORD_SEPARATORS.split(value) if word]
    if not words:
        return ''

    first, rest = words[0], words[1:]
    return first[0].lower() + first[1:] + ''.join(word[0].upper() + word[1:] for word in rest)


def extract_server_attributes(entries: Mapping[str, str]) -> List[Tuple[str, str]]:
    """
    Select server attributes from configuration entries

    Args:
        entries: Configuration entries in enumeration order

    Returns:
        (camelKey, rawValue) pairs, one per SERVER_* key other than SERVER_LOG_STREAM
    """
    attributes = []
    for key, value in entries.items():
        if key.startswith(SERVER_ATTRIBUTE_PREFIX) and key != SERVER_LOG_STREAM_KEY:
            attributes.append((camel_case(key[len(SERVER_ATTRIBUTE_PREFIX):]), value))
    return attributes


def build_server_attributes_query(entries: Mapping[str, str], encode_values: bool = False) -> str:
    """
    Render server attributes as uploadLogs query fragments

    Each attribute becomes '&server-<camelKey>=<value>'. Values are passed through
    unencoded unless encode_values is set.
    """
    fragments = []
    for name, value in extract_server_attributes(entries):
        if encode_values:
            value = encode_uri_component(value)
        elif QUERY_UNSAFE.search(value):
            logger.warning(f"Server attribute '{name}' contains characters that are not URL-safe; "
                           f"set ENCODE_SERVER_ATTRIBUTES=true to encode attribute values")
        fragments.append(f"&server-{name}={value}")
    return ''.join(fragments)
