"""
Canonical action serialization

The X-Akamai-ACS-Action header is signed and recomputed by the server from
the exact string sent, so the serialization must not depend on the order in
which parameters were populated: keys are sorted and form-encoded.
"""

from typing import Mapping
from urllib.parse import urlencode

from .action import Action


def convert_map_as_query_params(params: Mapping[str, str]) -> str:
    """
    Render a parameter mapping as a sorted, form-encoded query string.

    Args:
        params: Wire parameters (keys and values are strings)

    Returns:
        str: ``key=value`` pairs sorted by key and joined with ``&``;
        spaces encode as ``+``
    """
    # code point order, which is the same as UTF-8 byte order
    return urlencode(sorted(params.items()))


def serialize_action(action: Action) -> str:
    """
    Serialize an action into its canonical query string.

    Args:
        action: Action to serialize (sealed as a side effect)

    Returns:
        str: Canonical action header value
    """
    return convert_map_as_query_params(action.as_query_params())
