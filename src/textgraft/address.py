"""
Address encoding for tree locations.

An address is the dot-joined list of child indices from the root down to a
node, most significant first: "0.21.0" is the root's child 0, then its
child 21, then that node's child 0.
"""

from collections.abc import Iterable, Sequence

from .constants import ADDRESS_SEPARATOR
from .errors import InvalidAddressError

Address = str


def encode_address(indices: Iterable[int]) -> Address:
    """Join child indices into an address string."""
    return ADDRESS_SEPARATOR.join(str(i) for i in indices)


def decode_address(address: Address) -> Sequence[int]:
    """Split an address string into child indices.

    Args:
        address: Address like "0.21.0"

    Returns:
        Tuple of non-negative child indices

    Raises:
        InvalidAddressError: If a segment is not a non-negative decimal integer
    """
    if address == "":
        return ()

    indices = []
    for segment in address.split(ADDRESS_SEPARATOR):
        if not segment.isdecimal() or not segment.isascii():
            raise InvalidAddressError(address, f"segment {segment!r} is not a child index")
        indices.append(int(segment))
    return tuple(indices)
