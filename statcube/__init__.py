"""Selection, cardinality and cube addressing for statistical tables"""

__version__ = "0.1.0"

from .errors import *
from .config import *
from .logging import *
from .metadata import *
from .query import *
from .cube import *
