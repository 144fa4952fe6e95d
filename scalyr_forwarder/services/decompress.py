"""
Decoding of CloudWatch Logs subscription payloads
"""

import base64
import binascii
import gzip
import json
import logging
import re
import zlib
from typing import Any, Union

from pydantic import ValidationError

from scalyr_forwarder.errors import DecompressionError, ParseError
from scalyr_forwarder.models.batch import InputBatch

logger = logging.getLogger(__name__)

# json.loads joins escaped surrogate pairs, so any surrogate left in a string is unpaired
LONE_SURROGATE = re.compile('[\ud800-\udfff]')


def decompress_payload(data: Union[str, bytes]) -> bytes:
    """
    Base64-decode and gunzip a CloudWatch Logs payload

    Raises:
        DecompressionError: If the data is not valid base64 or gzip
    """
    try:
        compressed = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise DecompressionError(f"Payload is not valid base64: {str(e)}")

    try:
        decompressed = gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise DecompressionError(f"Payload is not valid gzip data: {str(e)}")

    logger.debug(f"Decompressed payload from {len(compressed)} to {len(decompressed)} bytes")
    return decompressed


def replace_lone_surrogates(value: Any) -> Any:
    """Swap unpaired surrogates for U+FFFD so the text can be UTF-8 encoded downstream"""
    if isinstance(value, str):
        return LONE_SURROGATE.sub('\ufffd', value)
    if isinstance(value, list):
        return [replace_lone_surrogates(item) for item in value]
    if isinstance(value, dict):
        return {replace_lone_surrogates(key): replace_lone_surrogates(item) for key, item in value.items()}
    return value


def parse_batch(raw: bytes) -> InputBatch:
    """
    Parse decompressed bytes into an InputBatch

    Raises:
        ParseError: If the text is not UTF-8 JSON shaped like a CloudWatch Logs batch
    """
    try:
        document = json.loads(raw.decode('utf-8'))
    except UnicodeDecodeError as e:
        raise ParseError(f"Payload is not valid UTF-8: {str(e)}")
    except json.JSONDecodeError as e:
        raise ParseError(f"Payload is not valid JSON: {str(e)}")

    if not isinstance(document, dict):
        raise ParseError(f"Expected a JSON object, got {type(document).__name__}")

    document = replace_lone_surrogates(document)

    try:
        return InputBatch.model_validate(document)
    except ValidationError as e:
        raise ParseError(f"Payload does not match the CloudWatch Logs format: {str(e)}")


def decode_batch(data: Union[str, bytes]) -> InputBatch:
    """Decompress and parse a base64 gzip payload into an InputBatch"""
    batch = parse_batch(decompress_payload(data))
    logger.info(f"Decoded batch with {len(batch.events)} log events from {batch.log_group}/{batch.log_stream}")
    return batch
