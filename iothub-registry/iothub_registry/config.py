# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import socks
from typing import Optional
from . import constant
from .custom_typing import Transport
from .http_transport import HTTPTransport


logger = logging.getLogger(__name__)


string_to_socks_constant_map = {"HTTP": socks.HTTP, "SOCKS4": socks.SOCKS4, "SOCKS5": socks.SOCKS5}
socks_constant_to_string_map = {socks.HTTP: "HTTP", socks.SOCKS4: "SOCKS4", socks.SOCKS5: "SOCKS5"}


class ProxyOptions:
    """
    A class containing various options to send traffic through proxy servers.
    """

    def __init__(
        self,
        proxy_type: str,
        proxy_address: str,
        proxy_port: Optional[int] = None,
        proxy_username: Optional[str] = None,
        proxy_password: Optional[str] = None,
    ):
        """
        Initializer for proxy options.
        :param str proxy_type: The type of the proxy server. This can be one of three possible choices: "HTTP", "SOCKS4", or "SOCKS5"
        :param str proxy_addr: IP address or DNS name of proxy server
        :param int proxy_port: The port of the proxy server. Defaults to 1080 for socks and 8080 for http.
        :param str proxy_username: (optional) username for the proxy server.
        :param str proxy_password: (optional) password for the proxy server.
        """
        (self.proxy_type, self.proxy_type_socks) = _format_proxy_type(proxy_type)
        self.proxy_address = proxy_address
        if proxy_port is None:
            self.proxy_port = _derive_default_proxy_port(self.proxy_type)
        else:
            self.proxy_port = int(proxy_port)
        self.proxy_username = proxy_username
        self.proxy_password = proxy_password


class RegistryClientConfig:
    """
    Class for storing all configurations/options of an IoTHubRegistryClient.
    """

    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        api_version: str = constant.IOTHUB_API_VERSION,
        page_size: int = constant.DEFAULT_PAGE_SIZE,
        sastoken_ttl: int = constant.DEFAULT_SASTOKEN_TTL,
        product_info: str = "",
        proxy_options: Optional[ProxyOptions] = None,
        server_verification_cert: Optional[str] = None,
        cipher: Optional[str] = None,
        http_timeout: float = constant.DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initializer for RegistryClientConfig

        :param transport: Object used to send HTTP requests. If not provided, an
            HTTPTransport is created from the network options below.
        :param str api_version: Version of the IoTHub REST API to use
        :param int page_size: Number of device twins requested per page when enumerating
        :param int sastoken_ttl: Time-to-live (in seconds) for generated SAS tokens
        :param str product_info: Arbitrary product information which will be included in the
            User-Agent string
        :param proxy_options: Details of proxy configuration (default transport only)
        :type proxy_options: :class:`ProxyOptions`
        :param str server_verification_cert: Certificate used to verify the server
            (default transport only)
        :param str cipher: Cipher string in OpenSSL cipher list format (default transport only)
        :param float http_timeout: Socket timeout in seconds (default transport only)

        :raises: ValueError if an invalid value is provided
        :raises: TypeError if a value of the wrong type is provided
        """
        self.api_version = _sanitize_api_version(api_version)
        self.page_size = _sanitize_page_size(page_size)
        self.sastoken_ttl = _sanitize_sastoken_ttl(sastoken_ttl)
        self.product_info = product_info

        # Network
        self.proxy_options = proxy_options
        self.server_verification_cert = server_verification_cert
        self.cipher = cipher
        self.http_timeout = http_timeout
        if transport is None:
            transport = HTTPTransport(
                server_verification_cert=server_verification_cert,
                cipher=cipher,
                proxy_options=proxy_options,
                timeout=http_timeout,
            )
        elif not callable(getattr(transport, "send", None)):
            raise TypeError("Invalid transport - must provide a 'send' method")
        self.transport = transport


# Sanitization #


def _format_proxy_type(proxy_type):
    """Returns a tuple of formats for proxy type (string, socks library constant)"""
    try:
        return (proxy_type, string_to_socks_constant_map[proxy_type])
    except KeyError:
        # The socks library constants are accepted as well
        try:
            return (socks_constant_to_string_map[proxy_type], proxy_type)
        except KeyError:
            raise ValueError("Invalid Proxy Type")


def _derive_default_proxy_port(proxy_type):
    if proxy_type == "HTTP":
        return 8080
    else:
        return 1080


def _sanitize_api_version(api_version):
    if not isinstance(api_version, str) or not api_version:
        raise ValueError("'api_version' must be a non-empty string")
    return api_version


def _sanitize_page_size(page_size):
    try:
        page_size = int(page_size)
    except (ValueError, TypeError):
        raise TypeError("Invalid type for 'page size'. Must be a numeric value.")

    if page_size <= 0:
        raise ValueError("'page size' must be greater than 0")

    if page_size > constant.MAX_PAGE_SIZE:
        raise ValueError("'page size' cannot exceed {}".format(constant.MAX_PAGE_SIZE))

    return page_size


def _sanitize_sastoken_ttl(sastoken_ttl):
    try:
        sastoken_ttl = int(sastoken_ttl)
    except (ValueError, TypeError):
        raise TypeError("Invalid type for 'sastoken ttl'. Must be a numeric value.")

    if sastoken_ttl <= 0:
        raise ValueError("'sastoken ttl' must be greater than 0")

    return sastoken_ttl
