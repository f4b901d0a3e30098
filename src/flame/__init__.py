"""
Welcome to the FLAME documentation!

FLAME (Fuzzy Logic Approximate Mamdani Engine) evaluates Mamdani rule bases
over linguistic variables, turning crisp inputs into crisp outputs. Systems
are immutable Equinox modules built on JAX, so a built system can be shared
across threads, vectorised over batches and compiled with ``eqx.filter_jit``.
"""

__version__ = "0.1.0"

from .defuzz import defuzzify
from .errors import (
    DomainViolation,
    FuzzyError,
    InvalidParameters,
    MissingInput,
    UnknownTerm,
    UnknownVariable,
    ZeroArea,
)
from .fiss import AggregatedSet, And, Consequent, Is, Mamdani, Not, Or, Rule, RuleBase
from .fuzzy_variable import FuzzyVariable
from .mfs import Gaussian, Trapezoidal, Triangular
from .ops import Operators
from .sampler import UniformSampler
