# Critic AI backend package.
# Exposes settings and the error hierarchy shared by critique/ and generate/.

from .errors import CriticError, FeedbackRequestError, ProviderConfigError, UnknownPersonaError

__all__ = ["CriticError", "FeedbackRequestError", "ProviderConfigError", "UnknownPersonaError"]
