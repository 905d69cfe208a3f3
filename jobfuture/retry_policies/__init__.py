from __future__ import annotations

from .constant import Constant
from .exponential import Exponential
from .linear import Linear
from .never import Never

__all__ = ["Constant", "Exponential", "Linear", "Never"]
