# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines an abstract SigningMechanism, as well as common child implementations of it
"""

import abc
import base64
import hashlib
import hmac


class SigningMechanism(abc.ABC):
    @abc.abstractmethod
    def sign(self, data_str):
        pass


class SymmetricKeySigningMechanism(SigningMechanism):
    def __init__(self, key):
        """
        A mechanism that signs data using a symmetric key

        :param bytes key: Symmetric Key (raw, already base64 decoded)
        :raises: ValueError if the key is empty or not bytes
        """
        if isinstance(key, str):
            key = key.encode("utf-8")
        if not isinstance(key, (bytes, bytearray)) or not key:
            raise ValueError("Invalid Symmetric Key")
        self._signing_key = bytes(key)

    def sign(self, data_str):
        """
        Sign a data string with symmetric key and the HMAC-SHA256 algorithm.

        :param data_str: Data string to be signed
        :type data_str: str or bytes

        :returns: The signed data, base64 encoded
        :rtype: str
        """
        # Convert data_str to bytes
        try:
            data_str = data_str.encode("utf-8")
        except AttributeError:
            # If byte string, no need to encode
            pass

        try:
            hmac_digest = hmac.HMAC(
                key=self._signing_key, msg=data_str, digestmod=hashlib.sha256
            ).digest()
        except TypeError:
            raise ValueError("Unable to sign string using the provided symmetric key")
        return base64.b64encode(hmac_digest).decode("utf-8")
