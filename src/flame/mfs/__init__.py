from .base_mf import BaseMF
from .gaussian import Gaussian
from .trapezoid import Trapezoidal
from .triangle import Triangular
