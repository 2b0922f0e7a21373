import secrets
import time

# 64 random bytes, hex-encoded to 128 characters
REFRESH_TOKEN_BYTES = 64
REFRESH_TOKEN_LENGTH = REFRESH_TOKEN_BYTES * 2


def generate_token_value(num_bytes: int = REFRESH_TOKEN_BYTES) -> str:
    """Generate an opaque refresh token value from the OS CSPRNG."""
    return secrets.token_hex(num_bytes)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000
