# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the iothub-registry-client package
"""

VERSION = "1.0.0"
IOTHUB_REGISTRY_IDENTIFIER = "iothub-registry-client-py"
IOTHUB_API_VERSION = "2021-04-12"

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000
DEFAULT_SASTOKEN_TTL = 3600
# Socket level timeout for the default transport, in seconds
DEFAULT_HTTP_TIMEOUT = 10

# Header names
AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"
ACCEPT_HEADER = "Accept"
USER_AGENT_HEADER = "User-Agent"
IF_MATCH_HEADER = "If-Match"
PAGE_SIZE_HEADER = "x-ms-max-item-count"
CONTINUATION_TOKEN_HEADER = "x-ms-continuation"

JSON_CONTENT_TYPE = "application/json"
