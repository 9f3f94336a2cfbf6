from __future__ import annotations

import os

from .alphabets import resolve_alphabet
from .generator import DEFAULT_SPACING_RATIO, Lexid, must

VERSION = "1.0.0"

LEXID_ALPHABET = os.getenv("LEXID_ALPHABET", "alphanumeric_lower")
LEXID_BLOCK_SIZE = int(os.getenv("LEXID_BLOCK_SIZE", "3"))
LEXID_STEP_SIZE = int(os.getenv("LEXID_STEP_SIZE", "100"))
LEXID_STRICT = os.getenv("LEXID_STRICT", "1").lower() not in ("0", "false", "no", "off")
LEXID_SPACING_RATIO = float(os.getenv("LEXID_SPACING_RATIO", str(DEFAULT_SPACING_RATIO)))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def build_generator() -> Lexid:
    """Generator for the configured alphabet; exits on a bad configuration."""
    return must(
        resolve_alphabet(LEXID_ALPHABET),
        LEXID_BLOCK_SIZE,
        LEXID_STEP_SIZE,
        strict=LEXID_STRICT,
        spacing_ratio=LEXID_SPACING_RATIO,
    )
