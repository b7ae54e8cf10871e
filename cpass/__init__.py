"""
cpass: a minimalist random password generator with entropy estimates.
"""

__version__ = "0.1.0"

from .config import GeneratorConfig, construct
from .errors import CpassError, EntropySourceError, InternalInvariantError, ValidationError
from .generator import PasswordGenerator, generate
from .strength import EntropyReport, entropy_max, entropy_min, estimate, rating_for
from .cli import GenerationResult, generate_password, generate_password_with_meta

__all__ = [
    "__version__",
    "GeneratorConfig",
    "construct",
    "CpassError",
    "EntropySourceError",
    "InternalInvariantError",
    "ValidationError",
    "PasswordGenerator",
    "generate",
    "EntropyReport",
    "entropy_max",
    "entropy_min",
    "estimate",
    "rating_for",
    "GenerationResult",
    "generate_password",
    "generate_password_with_meta",
]
