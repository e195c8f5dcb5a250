"""Slovo error types."""


class SlovoError(Exception):
    """Base error for all slovo failures."""


class SlovoResourceError(SlovoError):
    """Dictionary resource is missing, corrupt, or unusable."""


class SlovoVersionError(SlovoResourceError):
    """Manifest version mismatch."""


class SlovoChecksumError(SlovoResourceError):
    """File checksum verification failed."""


class SlovoClosedError(SlovoError):
    """Request made against an unloaded dictionary."""


class SlovoInputError(SlovoError, TypeError):
    """Input text is neither str nor bytes."""
