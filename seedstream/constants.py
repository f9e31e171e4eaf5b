# Public defaults (not secret; they only make output well-defined)
DEFAULT_SALT = bytes(16)
DEFAULT_IV = bytes(16)

# Seed requirements
MIN_SEED_SIZE = 16          # 128-bit floor for every seeded backend
SP800_MIN_SEED_SIZE = 32    # HMAC_DRBG security strength (256 bits)

# Domain separation constants absorbed by the XOF / SP800 backends
DOMAIN_BLAKE2XS = b"seedstream/blake2xs/v1"
DOMAIN_BLAKE3 = b"seedstream/blake3/v1"
DOMAIN_KMAC = b"seedstream/kmac256/v1"
DOMAIN_SP800 = b"seedstream/hmac-drbg/v1"

# Backend identifiers
BACKEND_SYSTEM = "system"
BACKEND_HASH_DRBG = "hash-drbg"
BACKEND_STREAM_CIPHER = "stream-cipher"
BACKEND_XOF_BLAKE2XS = "xof-blake2xs"
BACKEND_XOF_BLAKE3 = "xof-blake3"
BACKEND_XOF_KMAC = "xof-kmac"
BACKEND_SP800_DRBG = "sp800-drbg"

BACKENDS = (
    BACKEND_SYSTEM,
    BACKEND_HASH_DRBG,
    BACKEND_STREAM_CIPHER,
    BACKEND_XOF_BLAKE2XS,
    BACKEND_XOF_BLAKE3,
    BACKEND_XOF_KMAC,
    BACKEND_SP800_DRBG,
)

DEFAULT_PRIMITIVE = "blake2b"

# SP 800-90A HMAC_DRBG limits (Table 2, SHA-512)
SP800_MAX_REQUEST_BYTES = 1 << 16   # 2**19 bits
SP800_RESEED_INTERVAL = 1 << 48
