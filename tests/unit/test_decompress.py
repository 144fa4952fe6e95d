"""
Unit tests for CloudWatch payload decoding
"""
import base64
import gzip
import json

import pytest

from scalyr_forwarder.errors import DecompressionError, ParseError, PayloadError
from scalyr_forwarder.services.decompress import decode_batch, decompress_payload, parse_batch


class TestDecompressPayload:
    """Test base64 and gzip handling."""

    def test_valid_payload(self, make_payload):
        """Test a well-formed payload decompresses to the original JSON."""
        payload = make_payload({'owner': '123'})

        assert json.loads(decompress_payload(payload)) == {'owner': '123'}

    def test_accepts_bytes(self, make_payload):
        """Test the payload may be passed as bytes."""
        payload = make_payload({'owner': '123'}).encode('ascii')

        assert json.loads(decompress_payload(payload)) == {'owner': '123'}

    def test_invalid_base64(self):
        """Test a payload that is not base64."""
        with pytest.raises(DecompressionError) as exc_info:
            decompress_payload('not base64 !!!')

        assert "not valid base64" in str(exc_info.value)

    def test_not_gzip(self):
        """Test base64 data that is not gzip-compressed."""
        payload = base64.b64encode(b'{"owner": "123"}').decode('ascii')

        with pytest.raises(DecompressionError) as exc_info:
            decompress_payload(payload)

        assert "not valid gzip" in str(exc_info.value)

    def test_non_string_payload(self):
        """Test a null payload is a decompression error, not a TypeError."""
        with pytest.raises(DecompressionError) as exc_info:
            decompress_payload(None)

        assert "not valid base64" in str(exc_info.value)

    def test_truncated_gzip(self):
        """Test a gzip stream that was cut off."""
        compressed = gzip.compress(b'{"owner": "123", "logEvents": []}')
        payload = base64.b64encode(compressed[:len(compressed) // 2]).decode('ascii')

        with pytest.raises(DecompressionError):
            decompress_payload(payload)


class TestParseBatch:
    """Test JSON parsing into InputBatch."""

    def test_full_batch(self, sample_batch):
        """Test parsing a complete CloudWatch subscription batch."""
        batch = parse_batch(json.dumps(sample_batch).encode('utf-8'))

        assert batch.owner == '123456789012'
        assert batch.log_group == '/aws/lambda/payment-service'
        assert batch.log_stream == '2024/01/01/[$LATEST]abc123'
        assert batch.message_type == 'DATA_MESSAGE'
        assert [event.message for event in batch.events] == [
            'START RequestId: 1111 Version: $LATEST\n',
            'payment accepted amount=42'
        ]
        assert batch.events[1].timestamp == batch.events[0].timestamp + 15

    def test_invalid_json(self):
        """Test text that is not JSON."""
        with pytest.raises(ParseError) as exc_info:
            parse_batch(b'{"owner": ')

        assert "not valid JSON" in str(exc_info.value)

    def test_invalid_utf8(self):
        """Test bytes that are not UTF-8."""
        with pytest.raises(ParseError) as exc_info:
            parse_batch(b'\xff\xfe\xfa')

        assert "not valid UTF-8" in str(exc_info.value)

    def test_non_object_document(self):
        """Test a JSON document that is not an object."""
        with pytest.raises(ParseError) as exc_info:
            parse_batch(b'[1, 2, 3]')

        assert "Expected a JSON object" in str(exc_info.value)

    def test_event_missing_message(self):
        """Test an event without a message field."""
        document = {
            'owner': '123', 'logGroup': 'g', 'logStream': 's',
            'logEvents': [{'timestamp': 1000, 'id': 'a'}]
        }

        with pytest.raises(ParseError):
            parse_batch(json.dumps(document).encode('utf-8'))

    def test_events_without_owner(self):
        """Test a batch with events but no owner."""
        document = {
            'logGroup': 'g', 'logStream': 's',
            'logEvents': [{'timestamp': 1000, 'id': 'a', 'message': 'm'}]
        }

        with pytest.raises(ParseError) as exc_info:
            parse_batch(json.dumps(document).encode('utf-8'))

        assert "owner" in str(exc_info.value)

    def test_missing_log_events(self):
        """Test a batch without logEvents parses to an empty batch."""
        batch = parse_batch(b'{"owner": "123", "logGroup": "g", "logStream": "s"}')

        assert batch.events == []

    def test_control_message(self, control_message):
        """Test a CloudWatch control message parses with its single health-check event."""
        batch = parse_batch(json.dumps(control_message).encode('utf-8'))

        assert batch.message_type == 'CONTROL_MESSAGE'
        assert batch.log_group == ''
        assert [event.message for event in batch.events] == [
            'CWL CONTROL MESSAGE: Checking health of destination Firehose.'
        ]

    def test_lone_surrogates_replaced(self):
        """Test unpaired surrogate escapes become U+FFFD so the text stays UTF-8 encodable."""
        raw = (
            b'{"owner": "123", "logGroup": "/app/\\udc00x", "logStream": "s\\ud800",'
            b' "logEvents": [{"timestamp": 1000, "id": "a", "message": "bad \\ud800 char"}]}'
        )

        batch = parse_batch(raw)

        assert batch.events[0].message == 'bad \ufffd char'
        assert batch.log_group == '/app/\ufffdx'
        assert batch.log_stream == 's\ufffd'
        batch.events[0].message.encode('utf-8')

    def test_surrogate_pairs_kept(self):
        """Test properly paired escapes decode to the astral character."""
        raw = b'{"owner": "1", "logGroup": "g", "logStream": "s", "logEvents": [{"timestamp": 1, "id": "a", "message": "\\ud83d\\ude00"}]}'

        assert parse_batch(raw).events[0].message == '\U0001F600'


class TestDecodeBatch:
    """Test the combined decode step."""

    def test_decode(self, make_payload, scenario_batch):
        """Test decoding the scenario batch."""
        batch = decode_batch(make_payload(scenario_batch))

        assert batch.owner == '123'
        assert len(batch.events) == 1
        assert batch.events[0].id == 'a'

    def test_errors_share_base_class(self):
        """Test decode errors are PayloadErrors."""
        with pytest.raises(PayloadError):
            decode_batch('%%%')
