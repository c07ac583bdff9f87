from .common import LabelType
from .config import KeywordRule, ResolverConfig
from .document import XrefDocument
from .engine import CrossRefResolver, ResolutionSummary
from .tree import RenderedTree
from .typesetting import Capabilities, MathJaxAnchorLookup

__all__ = [
    "Capabilities",
    "CrossRefResolver",
    "KeywordRule",
    "LabelType",
    "MathJaxAnchorLookup",
    "RenderedTree",
    "ResolutionSummary",
    "ResolverConfig",
    "XrefDocument",
]
