"""Short code generation."""

import secrets
from typing import Callable, Optional

from snaplink.core.config import settings

CodeGenerator = Callable[[], str]


def generate_short_code(length: Optional[int] = None, alphabet: Optional[str] = None) -> str:
    """
    Draw a random short code.

    Every character is picked independently and uniformly from the alphabet
    with the ``secrets`` CSPRNG, so codes are not predictable from earlier ones.

    Args:
        length: Number of characters (defaults to URL_CODE_LENGTH)
        alphabet: Characters to draw from (defaults to URL_CODE_CHARS)

    Returns:
        str: A random short code
    """
    length = length or settings.URL_CODE_LENGTH
    alphabet = alphabet or settings.URL_CODE_CHARS
    return "".join(secrets.choice(alphabet) for _ in range(length))
