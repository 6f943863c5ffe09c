"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for admin input.

This module implements:
- SlugValidator: Validates catalog slugs used in ``/c/<slug>`` links

Validation Rules for Slugs:
--------------------------
- Length: 3-100 characters
- Allowed: lowercase letters, numbers, single hyphens
- Must start and end with a letter or number
- Spaces become hyphens, letters are lowercased, accents removed

==============================================================================
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional, Tuple


class SlugValidator:
    """
    Validator for catalog slugs.

    Example:
        >>> validator = SlugValidator()
        >>> is_valid, normalized, error = validator.validate("Verano Niños 2025")
        >>> print(normalized)
        'verano-ninos-2025'
    """

    # Regex pattern for valid slugs
    PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

    # Constraints
    MIN_LENGTH = 3
    MAX_LENGTH = 100

    @staticmethod
    def normalize(slug: str) -> str:
        """Lowercase, strip accents and turn whitespace runs into hyphens."""
        decomposed = unicodedata.normalize("NFKD", slug.strip().lower())
        ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
        return re.sub(r"\s+", "-", ascii_only)

    def validate(self, slug: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a slug.

        Args:
            slug: Raw slug input

        Returns:
            Tuple of (is_valid, normalized_slug, error_message)
            - If valid: (True, "normalized-slug", None)
            - If invalid: (False, None, "Error description")
        """
        if not slug or not slug.strip():
            return False, None, "Slug is required"

        normalized = self.normalize(slug)

        if len(normalized) < self.MIN_LENGTH:
            return False, None, f"Slug must be at least {self.MIN_LENGTH} characters"

        if len(normalized) > self.MAX_LENGTH:
            return False, None, f"Slug must be at most {self.MAX_LENGTH} characters"

        if not self.PATTERN.match(normalized):
            return False, None, "Slug can only contain letters, numbers and single hyphens"

        return True, normalized, None

    def is_valid(self, slug: str) -> bool:
        """Quick validation check."""
        is_valid, _, _ = self.validate(slug)
        return is_valid
