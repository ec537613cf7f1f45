# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Security parameters for CL credential issuance.

Issuer and holder must agree on every value here; changing one changes
the scheme.
"""

# Holder link secret
LARGE_MASTER_SECRET = 256

# Sophie Germain primes p', q' (the safe primes are one bit longer)
LARGE_PRIME = 1024

# Holder blinding exponent v'
LARGE_VPRIME = 2128

# Issuer randomizer v''
LARGE_VPRIME_PRIME = 2724

# Signature exponent window [2^LARGE_E_START, 2^LARGE_E_START + 2^LARGE_E_END_RANGE)
LARGE_E_START = 596
LARGE_E_END_RANGE = 119

# Search budgets
PRIME_SEARCH_ITERATIONS = 100_000
SAFE_PRIME_ATTEMPTS = 5_000_000

# Miller-Rabin rounds by candidate bit length (OpenSSL BN_prime_checks_for_size).
PRIMALITY_ROUNDS_TABLE = (
    (1300, 2),
    (850, 3),
    (650, 4),
    (550, 5),
    (450, 6),
    (400, 7),
    (350, 8),
    (300, 9),
    (250, 12),
    (200, 15),
    (150, 18),
)
PRIMALITY_ROUNDS_FLOOR = 27

# Small primes used to reject candidates before Miller-Rabin
TRIAL_DIVISION_BOUND = 2000

# Redraws of q' (must differ from p') and of the generator S (must be a unit mod n)
KEY_GENERATION_RETRIES = 16
