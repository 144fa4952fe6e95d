"""
AWS Lambda entry point for forwarding CloudWatch Logs subscriptions to Scalyr
Also supports a manual input mode for local testing
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from scalyr_forwarder.errors import ForwarderError, ParseError
from scalyr_forwarder.models.config import ForwarderConfig
from scalyr_forwarder.services.dispatcher import Dispatcher
from scalyr_forwarder.services.secrets import KmsDecryptor, SecretCache
from scalyr_forwarder.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

# Built on the first invocation and kept for the life of the container so the
# API key is decrypted once
_dispatcher: Optional[Dispatcher] = None


def build_dispatcher(config: Optional[ForwarderConfig] = None) -> Dispatcher:
    """Wire a Dispatcher from configuration"""
    if config is None:
        config = ForwarderConfig.from_environ()
    setup_logging(config.log_level)
    secret_cache = SecretCache(config.encrypted_api_key, KmsDecryptor(region=config.aws_region))
    return Dispatcher(config, secret_cache)


def get_dispatcher() -> Dispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher()
    return _dispatcher


def extract_payload(event: Dict[str, Any]) -> str:
    """Pull the base64 gzip data out of a CloudWatch Logs subscription event"""
    try:
        data = event['awslogs']['data']
    except (KeyError, TypeError) as e:
        raise ParseError(f"Invalid CloudWatch Logs event: missing {str(e)}")

    if not isinstance(data, str):
        raise ParseError(f"Invalid CloudWatch Logs event: awslogs.data must be a string, got {type(data).__name__}")
    return data


def lambda_handler(event: Dict[str, Any], context) -> str:
    """
    AWS Lambda handler for CloudWatch Logs subscription events

    Returns the outcome message on success, including non-200 answers from
    Scalyr. Decryption, payload and transport errors are raised so Lambda
    records the invocation as failed.
    """
    try:
        return get_dispatcher().dispatch(extract_payload(event))
    except ForwarderError as e:
        logger.error(f"Failed to forward CloudWatch logs to Scalyr: {str(e)}", exc_info=True)
        raise


def manual_input_mode() -> None:
    """
    Manual input mode for development/testing
    Reads a CloudWatch Logs subscription event (or its bare base64 data) from stdin
    """
    logger.info("Manual input mode - reading CloudWatch Logs event from stdin")

    input_data = sys.stdin.read().strip()
    if not input_data:
        logger.error("No input data provided")
        sys.exit(1)

    try:
        try:
            event = json.loads(input_data)
        except json.JSONDecodeError:
            event = {'awslogs': {'data': input_data}}

        result = lambda_handler(event, None)
        print(result)
    except ForwarderError as e:
        logger.error(f"Error processing manual input: {str(e)}")
        sys.exit(1)


def main():
    """
    Main entry point for standalone execution
    """
    parser = argparse.ArgumentParser(description='CloudWatch Logs to Scalyr forwarder')
    parser.add_argument('--mode', choices=['manual'], default='manual',
                        help='Execution mode: manual (stdin input)')

    args = parser.parse_args()

    if args.mode == 'manual':
        manual_input_mode()


if __name__ == '__main__':
    main()
