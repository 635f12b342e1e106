"""Shortcode generation utility

Shortcodes are fixed-length Base62 strings. A numeric seed (a counter or a
random draw) is scrambled with a salted affine permutation over the
Base62^length space and then Base62-encoded.

Functions:
    generate_shortcode(counter, salt='default_salt', length=6, mult=1315423911):
        Deterministically map a non-negative integer onto a shortcode.

    random_shortcode(length=6, salt='default_salt'):
        Draw a uniformly random shortcode from a cryptographic RNG.

Example:
    >>> from shortlinks.utils import generate_shortcode, random_shortcode
    >>> generate_shortcode(12345, salt='my_secret', length=7)
    'Gh71WPT'
    >>> len(random_shortcode(length=6))
    6
"""

import math
import string
import secrets

import xxhash


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

DEFAULT_MULTIPLIER = 1315423911


def encode_base62(value: int, length: int) -> str:
    """Encode `value` as exactly `length` Base62 digits, most significant first."""
    digits = [ALPHABET[(value // BASE**i) % BASE] for i in range(length)]
    return ''.join(reversed(digits))


def generate_shortcode(counter: int, salt: str = 'default_salt', length: int = 6, mult: int = DEFAULT_MULTIPLIER) -> str:
    """Map a non-negative integer onto a fixed-length Base62 shortcode.

    The mapping `counter -> (counter * mult + xxh64(salt)) mod BASE**length` is a
    bijection over the shortcode space as long as `mult` is coprime with the
    modulus, so distinct seeds below BASE**length never collide.

    Args:
        counter (int):
            Non-negative seed identifying the shortcode.
        salt (str, optional):
            Secret string used to offset the output space.
        length (int, optional):
            Number of characters in the shortcode. Defaults to 6.
        mult (int, optional):
            Multiplicative factor of the permutation. Must be coprime with BASE**length.

    Returns:
        str: shortcode made of [a-zA-Z0-9].

    Raises:
        TypeError: If counter or salt has the wrong type.
        ValueError: If counter is negative, salt is empty, length isn't positive
                    or mult isn't coprime with BASE**length.
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt!r}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    modulo_space = BASE**length
    if math.gcd(mult, modulo_space) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({modulo_space}) (given value: mult={mult}).')

    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space
    return encode_base62(permuted, length)


def random_shortcode(length: int = 6, salt: str = 'default_salt') -> str:
    """Draw a random shortcode of `length` characters.

    The draw is uniform over all Base62 codes of `length` characters and the
    salted permutation is a bijection, so the result stays uniform: `salt` has
    no observable effect here. It only matters for `generate_shortcode()`,
    where it makes counter-based codes unpredictable.

    NOTE: randomness alone doesn't guarantee uniqueness. Callers must check the
          data store and retry on collision.
    """
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    return generate_shortcode(secrets.randbelow(BASE**length), salt=salt, length=length)
