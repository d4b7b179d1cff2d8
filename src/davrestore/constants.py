"""Literal constants used by davrestore."""

DAV_NAMESPACE = "DAV:"
OC_NAMESPACE = "http://owncloud.org/ns"

# Endpoint conventions relative to the server base URL; {user} is percent-encoded.
TRASH_ROOT_TEMPLATE = "/remote.php/dav/trash-bin/{user}"
FILES_ROOT_TEMPLATE = "/remote.php/dav/files/{user}"

TRASH_PROPFIND_BODY = """<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:" xmlns:oc="http://owncloud.org/ns">
  <d:prop>
    <oc:trashbin-original-filename/>
    <oc:trashbin-original-location/>
    <oc:trashbin-delete-datetime/>
    <d:getcontentlength/>
    <d:resourcetype/>
  </d:prop>
</d:propfind>"""

EXISTENCE_PROPFIND_BODY = """<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:">
  <d:prop>
    <d:resourcetype/>
  </d:prop>
</d:propfind>"""

XML_CONTENT_TYPE = "application/xml; charset=UTF-8"
USER_AGENT = "davrestore/0.1"

# Retry/backoff defaults.
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_RETRY_BASE_MS = 300

# HTTP timeout buckets.
DEFAULT_TIMEOUT_SEC = 30.0
HTTP_CONNECT_TIMEOUT_SEC = 10.0
HTTP_POOL_TIMEOUT_SEC = 5.0

# Environment variables.
ENV_URL = "DAVRESTORE_URL"
ENV_USER = "DAVRESTORE_USER"
ENV_PASSWORD = "DAVRESTORE_PASSWORD"
ENV_SINCE = "DAVRESTORE_SINCE"
ENV_SHARD = "OC_SHARD"
ENV_SHARDS = "OC_SHARDS"

OK_PREFIX = "[OK]"
WARN_PREFIX = "[WARN]"
FAIL_PREFIX = "[FAIL]"
