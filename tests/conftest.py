"""
Test configuration and fixtures for unit tests
"""
import base64
import gzip
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

import pytest
from freezegun import freeze_time
from moto import mock_aws


def encode_payload(document: Any) -> str:
    """Gzip and base64-encode a document the way CloudWatch Logs delivers it."""
    raw = json.dumps(document).encode('utf-8')
    return base64.b64encode(gzip.compress(raw)).decode('ascii')


@pytest.fixture
def make_payload():
    """Encoder for CloudWatch Logs payloads."""
    return encode_payload


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock all AWS services."""
    with mock_aws():
        yield


@pytest.fixture
def environment_variables():
    """Set up test environment variables."""
    test_env = {
        'PARSER_NAME': 'cloudWatchLogs',
        'USE_ADD_EVENTS_API': 'false',
        'AWS_REGION': 'us-east-1',
        'SERVER_ENVIRONMENT': 'staging',
        'SERVER_LOG_STREAM': 'ignored'
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield test_env

    # Restore original values
    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def sample_batch() -> Dict[str, Any]:
    """A CloudWatch Logs subscription batch with two events."""
    with freeze_time("2024-01-01 12:00:00"):
        now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)

    return {
        'messageType': 'DATA_MESSAGE',
        'owner': '123456789012',
        'logGroup': '/aws/lambda/payment-service',
        'logStream': '2024/01/01/[$LATEST]abc123',
        'subscriptionFilters': ['scalyr-forwarder'],
        'logEvents': [
            {
                'id': '37000000000000000000000000000000000000000000000000000000',
                'timestamp': now_ms,
                'message': 'START RequestId: 1111 Version: $LATEST\n'
            },
            {
                'id': '37000000000000000000000000000000000000000000000000000001',
                'timestamp': now_ms + 15,
                'message': 'payment accepted amount=42'
            }
        ]
    }


@pytest.fixture
def scenario_batch() -> Dict[str, Any]:
    """The minimal single-event batch used across translation scenarios."""
    return {
        'owner': '123',
        'logGroup': '/app/x',
        'logStream': 's1',
        'logEvents': [{'timestamp': 1000, 'id': 'a', 'message': 'hello\n'}]
    }


@pytest.fixture
def control_message() -> Dict[str, Any]:
    """The health-check batch CloudWatch Logs sends when a subscription is created."""
    return {
        'messageType': 'CONTROL_MESSAGE',
        'owner': 'CloudwatchLogs',
        'logGroup': '',
        'logStream': '',
        'subscriptionFilters': [],
        'logEvents': [
            {
                'id': '',
                'timestamp': 1704110400000,
                'message': 'CWL CONTROL MESSAGE: Checking health of destination Firehose.'
            }
        ]
    }
