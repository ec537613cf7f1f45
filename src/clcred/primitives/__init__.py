# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Numeric primitives and randomness utilities.
"""

from .numbers import (
    from_decimal,
    to_decimal,
    random_bits,
    primality_rounds,
    is_probable_prime,
    mod_add,
    mod_mul,
    mod_exp,
    mod_inverse,
    sha256_int,
    hash_to_int,
)
from .search import (
    random_in_range,
    random_quadratic_residue,
    random_quadratic_residue_with_root,
    find_prime_in_range,
    generate_safe_prime,
)

__all__ = [
    "from_decimal",
    "to_decimal",
    "random_bits",
    "primality_rounds",
    "is_probable_prime",
    "mod_add",
    "mod_mul",
    "mod_exp",
    "mod_inverse",
    "sha256_int",
    "hash_to_int",
    "random_in_range",
    "random_quadratic_residue",
    "random_quadratic_residue_with_root",
    "find_prime_in_range",
    "generate_safe_prime",
]
