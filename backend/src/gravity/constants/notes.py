"""Note content constants."""

# =============================================================================
# Validation
# =============================================================================

MAX_CONTENT_LENGTH = 10_000

# =============================================================================
# Normalization
# =============================================================================
# Zero-width space, zero-width non-joiner, zero-width joiner and byte order
# mark; they break substring search.

INVISIBLE_CHARS = tuple(chr(code) for code in (0x200B, 0x200C, 0x200D, 0xFEFF))
