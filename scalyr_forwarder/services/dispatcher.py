"""
Orchestration of one CloudWatch batch: decrypt, decode, translate, send, interpret
"""

import logging
from typing import Optional, Union

from scalyr_forwarder.models.config import ForwarderConfig
from scalyr_forwarder.models.messages import HttpResponse
from scalyr_forwarder.services.decompress import decode_batch
from scalyr_forwarder.services.delivery import HttpSender
from scalyr_forwarder.services.request_builder import build_request
from scalyr_forwarder.services.secrets import SecretCache
from scalyr_forwarder.services.translator import translate

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = "No log events to submit to Scalyr."


def describe_response(response: HttpResponse, event_count: int) -> str:
    """
    Summarize a Scalyr response for the invoker.

    Non-200 answers are reported, not raised, so the runtime does not keep
    retrying a batch Scalyr has already rejected.
    """
    if response.status_code == 200:
        return f"Successfully submitted {event_count} log events to Scalyr."

    msg = f"Received status code {response.status_code}"
    if response.error:
        msg += f" and error '{response.error}'"
    msg += " from Scalyr"
    return msg


class Dispatcher:
    """Runs the forwarding pipeline for one batch at a time"""

    def __init__(self, config: ForwarderConfig, secret_cache: SecretCache, sender: Optional[HttpSender] = None):
        self.config = config
        self.secret_cache = secret_cache
        self.sender = sender or HttpSender(timeout=config.http_timeout)

    def dispatch(self, data: Union[str, bytes]) -> str:
        """
        Forward one base64 gzip CloudWatch payload to Scalyr

        Args:
            data: The awslogs.data payload

        Returns:
            Human-readable outcome message

        Raises:
            DecryptionError: If the API key cannot be decrypted
            DecompressionError: If the payload is not base64 gzip
            ParseError: If the payload is not a CloudWatch Logs document
            TransportError: If Scalyr could not be reached
        """
        api_key = self.secret_cache.get()

        batch = decode_batch(data)
        if not batch.events:
            logger.info(NO_EVENTS_MESSAGE)
            return NO_EVENTS_MESSAGE

        message = translate(batch, api_key, self.config.parser_name, self.config.use_add_events_api)
        request = build_request(message, self.config)

        api_name = 'addEvents' if self.config.use_add_events_api else 'uploadLogs'
        logger.info(f"Sending {len(batch.events)} log events to Scalyr {api_name} API")

        response = self.sender.send(request)
        logger.info(f"Response from Scalyr: {response.body}")

        msg = describe_response(response, len(batch.events))
        if response.status_code == 200:
            logger.info(msg)
        else:
            logger.warning(msg)
        return msg
