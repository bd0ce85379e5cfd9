"""
Constants for the HMAC data source client.
Compatible with the observation API's server-side HMAC verifier.
"""

# HTTP Headers
HEADER_DATE = "Date"
HEADER_AUTHORIZATION = "Authorization"

# Only GET is signed; the API exposes read endpoints only
SIGNED_METHOD = "GET"
CANONICAL_SEPARATOR = "\n"

# Equivalent to JavaScript's Date.toISOString()
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Resource paths
INDEX_PATH = "sites"
QUERY_ROOT = "site"
QUERY_COLLECTION = "datastreams"
QUERY_PATH = "observations"

# Query parameter names
QUERY_START = "from"
QUERY_END = "until"
QUERY_TAGS = "datastreamIds"

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': 30,              # HTTP timeout in seconds
    'base_path': '',            # e.g. "/xcloud/data-export"
    'auth_method': 'xCloud',
}
