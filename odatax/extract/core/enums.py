"""Core enumerations and protocol constants.

String enums keep the values identical to the property values accepted in
connector configuration, so a config dict can be validated straight into them.
"""

from enum import Enum


class AuthType(str, Enum):
    """Authentication scheme used for every service call."""

    BASIC = "basicAuth"
    OAUTH2 = "oAuth2"


class AssertionTokenType(str, Enum):
    """How the SAML assertion for the OAuth2 exchange is obtained."""

    ENTER_TOKEN = "enterToken"
    CREATE_TOKEN = "createToken"


class MediaType(str, Enum):
    """Accept header values understood by the service."""

    JSON = "application/json"
    XML = "application/xml"
    TEXT = "text/plain"


# Response header carrying the OData protocol version
SERVICE_VERSION_HEADER = "DataServiceVersion"

# OAuth2 SAML bearer grant
SAML2_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:saml2-bearer"

# Query options
TOP_OPTION = "$top"
SKIP_OPTION = "$skip"
FILTER_OPTION = "$filter"
SELECT_OPTION = "$select"
EXPAND_OPTION = "$expand"
COUNT_SEGMENT = "$count"
METADATA_SEGMENT = "$metadata"
PROPERTY_SEPARATOR = ","
