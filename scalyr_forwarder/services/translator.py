"""
Translation of CloudWatch Logs batches into Scalyr messages

Both transforms are pure: the caller supplies the decrypted API key and parser name.
"""

from scalyr_forwarder.models.batch import InputBatch
from scalyr_forwarder.models.messages import (
    AddEventsMessage,
    EventAttributes,
    ScalyrEvent,
    ScalyrMessage,
    SessionInfo,
    UploadLogsMessage
)
from scalyr_forwarder.services.attributes import encode_uri_component


def transform_to_add_events_message(batch: InputBatch, api_key: str, parser_name: str) -> AddEventsMessage:
    """
    Translate a CloudWatch batch into an addEvents request body.

    Timestamps are padded with six zeros to turn milliseconds into the
    nanosecond-looking strings addEvents expects. Messages are copied verbatim.
    """
    return AddEventsMessage(
        token=api_key,
        session=batch.log_stream,
        session_info=SessionInfo(
            server_host=batch.server_host,
            logfile=batch.log_group,
            parser=parser_name
        ),
        events=[
            ScalyrEvent(
                ts=f"{event.timestamp}000000",
                attrs=EventAttributes(
                    cw_stream=batch.log_stream,
                    cw_id=event.id,
                    message=event.message
                )
            )
            for event in batch.events
        ]
    )


def strip_trailing_newline(message: str) -> str:
    if message.endswith('\n'):
        return message[:-1]
    return message


def transform_to_upload_logs_message(batch: InputBatch, api_key: str) -> UploadLogsMessage:
    """
    Translate a CloudWatch batch into an uploadLogs message.

    Query values are URL-encoded here; the body joins the raw messages with
    newlines after dropping one trailing newline from each.
    """
    return UploadLogsMessage(
        token=encode_uri_component(api_key),
        host=encode_uri_component(batch.server_host),
        logfile=encode_uri_component(batch.log_group),
        log_stream=encode_uri_component(batch.log_stream),
        body='\n'.join(strip_trailing_newline(event.message) for event in batch.events)
    )


def translate(batch: InputBatch, api_key: str, parser_name: str, use_add_events_api: bool) -> ScalyrMessage:
    """Pick the Scalyr message format once per batch"""
    if use_add_events_api:
        return transform_to_add_events_message(batch, api_key, parser_name)
    return transform_to_upload_logs_message(batch, api_key)
