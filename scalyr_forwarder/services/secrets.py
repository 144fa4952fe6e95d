"""
KMS decryption of the Scalyr API key, cached for the lifetime of the process
"""

import base64
import binascii
import logging
import threading
from typing import Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from scalyr_forwarder.errors import DecryptionError

logger = logging.getLogger(__name__)


class KmsDecryptor:
    """
    Decrypts base64-encoded KMS ciphertext.

    The boto3 client is created on first use so importing the handler does not
    touch AWS.
    """

    def __init__(self, region: Optional[str] = None):
        self.region = region
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the KMS client"""
        if self._client is None:
            self._client = boto3.client('kms', region_name=self.region)
        return self._client

    def __call__(self, ciphertext: str) -> str:
        try:
            blob = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecryptionError(f"Encrypted API key is not valid base64: {str(e)}")

        try:
            response = self.client.decrypt(CiphertextBlob=blob)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            raise DecryptionError(f"KMS decrypt failed ({error_code}): {str(e)}")
        except BotoCoreError as e:
            raise DecryptionError(f"KMS decrypt failed: {str(e)}")

        return response['Plaintext'].decode('utf-8')


class SecretCache:
    """
    Holds the decrypted Scalyr API key for the lifetime of the process.

    The first get() decrypts; later calls reuse the plaintext. A failed decrypt
    leaves the cache empty so the next call tries again. The lock keeps at most
    one decrypt in flight when invocations share a process.
    """

    def __init__(self, ciphertext: Optional[str], decrypt: Callable[[str], str]):
        self._ciphertext = ciphertext
        self._decrypt = decrypt
        self._plaintext: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._plaintext is not None

    def get(self) -> str:
        """
        Return the plaintext API key, decrypting it on first use

        Raises:
            DecryptionError: If the key is not configured or cannot be decrypted
        """
        if self._plaintext is not None:
            return self._plaintext

        with self._lock:
            if self._plaintext is None:
                if not self._ciphertext:
                    raise DecryptionError("SCALYR_WRITE_LOGS_KEY is not configured")

                logger.info("Decrypting Scalyr API key")
                try:
                    self._plaintext = self._decrypt(self._ciphertext)
                except DecryptionError as e:
                    logger.error(f"Decryption error: {str(e)}")
                    raise
        return self._plaintext
