# --------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import ssl
import requests  # type: ignore
from requests.structures import CaseInsensitiveDict  # type: ignore
from . import constant

logger = logging.getLogger(__name__)


class HTTPRequest(object):
    """An outgoing HTTP request.

    :ivar str method: The request method (e.g. "GET")
    :ivar str url: The full URL, including query parameters
    :ivar headers: Case-insensitive mapping of header names to values
    :ivar str body: The body of the request, or None
    """

    def __init__(self, method, url, headers=None, body=None):
        self.method = method
        self.url = url
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body

    def __repr__(self):
        return "HTTPRequest({} {})".format(self.method, self.url)


class HTTPResponse(object):
    """A received HTTP response.

    :ivar int status_code: The status code of the response
    :ivar str reason: The reason phrase of the response
    :ivar headers: Case-insensitive mapping of header names to values
    :ivar str body: The body of the response, as text
    """

    def __init__(self, status_code, reason="", headers=None, body=""):
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body

    def __repr__(self):
        return "HTTPResponse({} {})".format(self.status_code, self.reason)


class HTTPTransport(object):
    """
    A wrapper class that provides an implementation-agnostic HTTP interface.
    """

    def __init__(
        self,
        server_verification_cert=None,
        cipher=None,
        proxy_options=None,
        timeout=constant.DEFAULT_HTTP_TIMEOUT,
    ):
        """
        Constructor to instantiate an HTTP protocol wrapper.

        :param str server_verification_cert: Certificate which can be used to validate a server-side TLS connection (optional).
        :param str cipher: Cipher string in OpenSSL cipher list format (optional)
        :param proxy_options: Options for sending traffic through proxy servers.
        :param float timeout: Socket timeout for each request, in seconds.
        """
        self._server_verification_cert = server_verification_cert
        self._cipher = cipher
        self._proxies = format_proxies(proxy_options)
        self._timeout = timeout
        self._http_adapter = self._create_http_adapter()

    def _create_http_adapter(self):
        """
        This method creates a custom HTTPAdapter for use with a requests library session.
        It will allow for use of a custom configured SSL context.
        """
        ssl_context = self._create_ssl_context()

        class CustomSSLContextHTTPAdapter(requests.adapters.HTTPAdapter):
            def init_poolmanager(self, *args, **kwargs):
                kwargs["ssl_context"] = ssl_context
                return super().init_poolmanager(*args, **kwargs)

            def proxy_manager_for(self, *args, **kwargs):
                kwargs["ssl_context"] = ssl_context
                return super().proxy_manager_for(*args, **kwargs)

        return CustomSSLContextHTTPAdapter()

    def _create_ssl_context(self):
        """
        This method creates the SSLContext object used to authenticate the connection.
        """
        logger.debug("creating a SSL context")
        ssl_context = ssl.SSLContext(protocol=ssl.PROTOCOL_TLS_CLIENT)
        ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2

        if self._server_verification_cert:
            ssl_context.load_verify_locations(cadata=self._server_verification_cert)
        else:
            ssl_context.load_default_certs()

        if self._cipher:
            ssl_context.set_ciphers(self._cipher)

        ssl_context.verify_mode = ssl.CERT_REQUIRED
        ssl_context.check_hostname = True

        return ssl_context

    def send(self, request):
        """
        Send a request to a remote host, then wait for and read the response to that request.

        Exactly one attempt is made. Errors raised by the underlying HTTP library propagate
        to the caller.

        :param request: The request to send
        :type request: :class:`HTTPRequest`
        :returns: The response
        :rtype: :class:`HTTPResponse`
        """
        logger.info("sending https {} request to {} .".format(request.method, request.url))

        # Mount the transport adapter to a requests session. The session (and with it the
        # connection) is closed once the response body has been read.
        with requests.Session() as session:
            session.mount("https://", self._http_adapter)
            response = session.request(
                request.method,
                request.url,
                data=request.body,
                headers=dict(request.headers),
                proxies=self._proxies,
                timeout=self._timeout,
            )
            return HTTPResponse(
                status_code=response.status_code,
                reason=response.reason,
                headers=response.headers,
                body=response.text,
            )


def format_proxies(proxy_options):
    """
    Format the data from the proxy_options object into a format for use with the requests library
    """
    proxies = {}
    if proxy_options:
        # Basic address/port formatting
        proxy = "{address}:{port}".format(
            address=proxy_options.proxy_address, port=proxy_options.proxy_port
        )
        # Add credentials if necessary
        if proxy_options.proxy_username and proxy_options.proxy_password:
            auth = "{username}:{password}".format(
                username=proxy_options.proxy_username, password=proxy_options.proxy_password
            )
            proxy = auth + "@" + proxy
        # Set proxy for use on HTTP or HTTPS connections
        if proxy_options.proxy_type == "HTTP":
            proxies["http"] = "http://" + proxy
            proxies["https"] = "http://" + proxy
        elif proxy_options.proxy_type == "SOCKS4":
            proxies["http"] = "socks4://" + proxy
            proxies["https"] = "socks4://" + proxy
        elif proxy_options.proxy_type == "SOCKS5":
            proxies["http"] = "socks5://" + proxy
            proxies["https"] = "socks5://" + proxy
        else:
            # This should be unreachable due to validation on the ProxyOptions object
            raise ValueError("Invalid proxy type: {}".format(proxy_options.proxy_type))

    return proxies
