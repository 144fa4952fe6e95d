"""
CloudWatch Logs to Scalyr forwarder
"""

__version__ = "1.0.0"
