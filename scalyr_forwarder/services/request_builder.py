"""
Construction of HTTP requests for the Scalyr ingestion APIs
"""

import json

from scalyr_forwarder.models.config import ForwarderConfig
from scalyr_forwarder.models.messages import AddEventsMessage, OutgoingRequest, ScalyrMessage, UploadLogsMessage
from scalyr_forwarder.services.attributes import build_server_attributes_query


def build_add_events_request(message: AddEventsMessage, config: ForwarderConfig) -> OutgoingRequest:
    return OutgoingRequest(
        url=config.add_events_url,
        headers={'content-type': 'application/json'},
        body=json.dumps(message.to_document())
    )


def build_upload_logs_request(message: UploadLogsMessage, config: ForwarderConfig) -> OutgoingRequest:
    """
    Build an uploadLogs request

    The stream goes out as server-logStream so Scalyr records it as a server
    attribute; SERVER_* variables are appended after the parser.
    """
    server_attributes_qs = build_server_attributes_query(
        config.server_variables,
        encode_values=config.encode_server_attributes
    )
    url = (
        f"{config.upload_logs_url}?token={message.token}&host={message.host}"
        f"&logfile={message.logfile}&server-logStream={message.log_stream}"
        f"&parser={config.parser_name}{server_attributes_qs}"
    )
    return OutgoingRequest(
        url=url,
        headers={'content-type': 'text/plain'},
        body=message.body
    )


def build_request(message: ScalyrMessage, config: ForwarderConfig) -> OutgoingRequest:
    """Turn a translated message into a POST request for its endpoint"""
    if isinstance(message, AddEventsMessage):
        return build_add_events_request(message, config)
    return build_upload_logs_request(message, config)
