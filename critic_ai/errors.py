# ============================================================
# errors.py
# ------------------------------------------------------------
# Failures that cross the core boundary. Everything else
# (provider errors, bad model output, unfindable quotes) is
# absorbed per persona and never raised to the caller.
# ============================================================


class CriticError(Exception):
    """Base class for errors reported to the caller."""


class FeedbackRequestError(CriticError):
    """The request itself is unusable (blank document, unknown mode)."""


class ProviderConfigError(CriticError):
    """The model provider cannot be used at all (e.g. missing API key)."""


class UnknownPersonaError(CriticError, KeyError):
    """Lookup of a persona id that is not registered."""

    def __str__(self) -> str:
        return f"Unknown persona: {self.args[0]!r}" if self.args else "Unknown persona"
