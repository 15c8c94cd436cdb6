"""
Versioned storage shapes for a client's redirect URIs.

Schema version 1 kept the list as a comma-delimited string; version 2 (current)
keeps a JSON array. Rows are read with the codec matching their version tag and
always written back with the current one.
"""

import json
from typing import Dict, List, Optional

from idp_console.oauth_client.util import normalize_redirect_uris

LEGACY_REDIRECT_URIS_VERSION = 1
CURRENT_REDIRECT_URIS_VERSION = 2


class RedirectUriCodec:
    version: int

    def read(self, raw: Optional[str]) -> List[str]:
        raise NotImplementedError

    def write(self, uris: List[str]) -> str:
        raise NotImplementedError


class DelimitedRedirectUriCodec(RedirectUriCodec):
    version = LEGACY_REDIRECT_URIS_VERSION

    def read(self, raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        return normalize_redirect_uris(raw.split(","))

    def write(self, uris: List[str]) -> str:
        return ",".join(normalize_redirect_uris(uris))


class JsonRedirectUriCodec(RedirectUriCodec):
    version = CURRENT_REDIRECT_URIS_VERSION

    def read(self, raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        value = json.loads(raw)
        if isinstance(value, str):
            # Doubly-encoded legacy value.
            return DelimitedRedirectUriCodec().read(value)
        if not isinstance(value, list):
            raise ValueError(f"Unexpected redirect URI payload type: {type(value).__name__}")
        return normalize_redirect_uris(str(item) for item in value)

    def write(self, uris: List[str]) -> str:
        return json.dumps(normalize_redirect_uris(uris))


CODECS: Dict[int, RedirectUriCodec] = {
    LEGACY_REDIRECT_URIS_VERSION: DelimitedRedirectUriCodec(),
    CURRENT_REDIRECT_URIS_VERSION: JsonRedirectUriCodec(),
}


def get_codec(version: Optional[int], raw: Optional[str] = None) -> RedirectUriCodec:
    """
    Codec for a version tag; untagged values are sniffed by shape.
    """
    if version is None:
        if raw and raw.lstrip().startswith("["):
            return CODECS[CURRENT_REDIRECT_URIS_VERSION]
        return CODECS[LEGACY_REDIRECT_URIS_VERSION]
    try:
        return CODECS[version]
    except KeyError:
        raise ValueError(f"Unknown redirect URI schema version: {version}") from None


def read_redirect_uris(raw: Optional[str], version: Optional[int]) -> List[str]:
    return get_codec(version, raw).read(raw)


def write_redirect_uris(uris: List[str]) -> tuple[str, int]:
    """Storage value and version tag for the current representation."""
    codec = CODECS[CURRENT_REDIRECT_URIS_VERSION]
    return codec.write(uris), codec.version
