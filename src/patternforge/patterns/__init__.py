"""Pattern generator families.

Importing this package registers every family with the global
``pattern_registry``. Import order is listing order.
"""

# isort: off
from patternforge.patterns import basic  # noqa: F401
from patternforge.patterns import geometric  # noqa: F401
from patternforge.patterns import natural  # noqa: F401
from patternforge.patterns import abstract  # noqa: F401
from patternforge.patterns import cosmic  # noqa: F401
from patternforge.patterns import architectural  # noqa: F401
from patternforge.patterns import texture  # noqa: F401
from patternforge.patterns import structural  # noqa: F401
from patternforge.patterns import glitch  # noqa: F401

# isort: on
