# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with Shared Access Signature (SAS) Tokens"""

import logging
import time
import urllib.parse
from typing import Dict, List, Optional
from .constant import DEFAULT_SASTOKEN_TTL
from .signing_mechanism import SigningMechanism, SymmetricKeySigningMechanism


logger = logging.getLogger(__name__)

REQUIRED_SASTOKEN_FIELDS: List[str] = ["sr", "sig", "se"]
TOKEN_FORMAT: str = "SharedAccessSignature sr={resource}&sig={signature}&se={expiry}"
SERVICE_TOKEN_FORMAT: str = TOKEN_FORMAT + "&skn={key_name}"


class SasTokenError(Exception):
    """Error in SasToken"""

    pass


class SasToken:
    def __init__(self, sastoken_str: str) -> None:
        """Create a SasToken object from a SAS Token string
        :param str sastoken_str: The SAS Token string

        :raises: ValueError if SAS Token string is invalid
        """
        self._token_str: str = sastoken_str
        self._token_info: Dict[str, str] = _get_sastoken_info_from_string(sastoken_str)

    def __str__(self) -> str:
        return self._token_str

    def is_expired(self) -> bool:
        return time.time() >= self.expiry_time

    @property
    def expiry_time(self) -> float:
        # NOTE: Time is typically expressed in float in Python, even though a
        # SAS Token expiry time should be a whole number.
        return float(self._token_info["se"])

    @property
    def resource_uri(self) -> str:
        uri = self._token_info["sr"]
        return urllib.parse.unquote(uri)

    @property
    def signature(self) -> str:
        signature = self._token_info["sig"]
        return urllib.parse.unquote(signature)

    @property
    def key_name(self) -> Optional[str]:
        return self._token_info.get("skn")


class SasTokenGenerator:
    def __init__(
        self,
        signing_mechanism: SigningMechanism,
        uri: str,
        key_name: Optional[str] = None,
        ttl: int = DEFAULT_SASTOKEN_TTL,
    ) -> None:
        """An object that can generate SasTokens using provided values

        :param signing_mechanism: The signing mechanism that will be used to sign data
        :type signing mechanism: :class:`SigningMechanism`
        :param str uri: The URI of the resource you are generating a tokens to access
        :param str key_name: Name of the shared access policy the key belongs to (optional)
        :param int ttl: Time to live for generated tokens, in seconds (default 3600)
        """
        self.signing_mechanism = signing_mechanism
        self.uri = uri
        self.key_name = key_name
        self.ttl = ttl

    def generate_sastoken(self, expiry_time: Optional[int] = None) -> SasToken:
        """Generate a new SasToken

        The signature is a pure function of the resource, the expiry time and the key.

        :param int expiry_time: Expiry time of the token, in seconds since epoch. Derived from
            the current time and the ttl if not provided.
        :raises: SasTokenError if the token cannot be generated
        """
        if expiry_time is None:
            expiry_time = int(time.time()) + self.ttl
        url_encoded_uri = urllib.parse.quote(self.uri, safe="")
        message = url_encoded_uri + "\n" + str(expiry_time)
        try:
            signature = self.signing_mechanism.sign(message)
        except Exception as e:
            # Because of variant signing mechanisms, we don't know what error might be raised.
            # So we catch all of them.
            raise SasTokenError("Unable to generate SasToken") from e
        url_encoded_signature = urllib.parse.quote(signature, safe="")
        if self.key_name:
            token_str = SERVICE_TOKEN_FORMAT.format(
                resource=url_encoded_uri,
                signature=url_encoded_signature,
                expiry=str(expiry_time),
                key_name=urllib.parse.quote(self.key_name, safe=""),
            )
        else:
            token_str = TOKEN_FORMAT.format(
                resource=url_encoded_uri,
                signature=url_encoded_signature,
                expiry=str(expiry_time),
            )
        return SasToken(token_str)


def create_sastoken_generator(
    connection_string, uri: Optional[str] = None, ttl: int = DEFAULT_SASTOKEN_TTL
) -> SasTokenGenerator:
    """Create a SasTokenGenerator that signs with the key of a connection string.

    :param connection_string: The connection string holding the key and policy name
    :type connection_string: :class:`iothub_registry.ConnectionString`
    :param str uri: The resource to grant access to. Defaults to the IoTHub hostname.
    :param int ttl: Time to live for generated tokens, in seconds
    :raises: SasTokenError if the connection string holds no usable key
    """
    try:
        signing_mechanism = SymmetricKeySigningMechanism(connection_string.key)
    except ValueError as e:
        raise SasTokenError("Connection string has no usable key") from e
    return SasTokenGenerator(
        signing_mechanism=signing_mechanism,
        uri=uri or connection_string.host_name,
        key_name=connection_string.name,
        ttl=ttl,
    )


def _get_sastoken_info_from_string(sastoken_string: str) -> Dict[str, str]:
    """Given a SAS Token string, return a dictionary of it's keys and values"""
    pieces = sastoken_string.split("SharedAccessSignature ")
    if len(pieces) != 2:
        raise ValueError("Invalid SAS Token string: Not a SAS Token ")

    # Get sastoken info as dictionary
    try:
        sastoken_info = dict(
            map(str.strip, sub.split("=", 1)) for sub in pieces[1].split("&")  # type: ignore
        )
    except Exception as e:
        raise ValueError("Invalid SAS Token string: Incorrectly formatted") from e

    # Validate that all required fields are present
    if not all(key in sastoken_info for key in REQUIRED_SASTOKEN_FIELDS):
        raise ValueError("Invalid SAS Token string: Not all required fields present")

    # Warn if extraneous fields are present
    if not all(key in REQUIRED_SASTOKEN_FIELDS + ["skn"] for key in sastoken_info):
        logger.warning("Unexpected fields present in SAS Token")

    return sastoken_info
