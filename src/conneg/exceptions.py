class ConfigurationError(Exception):
    """
    Raised when the negotiation API is used with an invalid setup.

    This indicates a programming error in the calling application (for
    example a handler table without a ``no_match`` fallback), never a
    problem with the request headers.
    """
