"""
Exception hierarchy for the forwarding pipeline
"""


class ForwarderError(Exception):
    """Base class for all forwarder errors"""
    pass


class ConfigurationError(ForwarderError):
    """Raised when an environment setting has an invalid value"""
    pass


class DecryptionError(ForwarderError):
    """Raised when the Scalyr API key cannot be decrypted"""
    pass


class PayloadError(ForwarderError):
    """Base class for errors in the inbound CloudWatch payload"""
    pass


class DecompressionError(PayloadError):
    """Raised when the payload is not valid base64-encoded gzip data"""
    pass


class ParseError(PayloadError):
    """Raised when the decompressed payload is not a CloudWatch Logs document"""
    pass


class TransportError(ForwarderError):
    """Raised when no HTTP response was received from Scalyr"""
    pass
