"""
vt: front end for a dense single-character stack language.

Every line of a ``.vt`` file is a method; trailing ``;e``/``;u`` lines
extend or use other files by relative path.

| Layer                       | Purpose                                   |
<---------------------------- + ----------------------------------------- >
| **Lexer**                   | Character → Operation or 4-bit Value      |
| **Parser**                  | File text → Program (methods, ;e, ;u)     |
| **Resolver**                | Root file → DependencyGraph, each once    |
| **Enrichment cache**        | (file, index) → shared instruction list   |
| **Analysis**                | NetworkX / Graphviz views of the graph    |
| **Image**                   | Portable ``.vt.json`` hand-off document   |
"""

from . import core as _core
from . import lexer as _lexer
from . import parser as _parser
from . import loader as _loader
from . import resolver as _resolver
from . import enrich as _enrich
from . import analysis as _analysis
from . import image as _image
from .cli import main, parse_args

from .core import *
from .lexer import *
from .parser import *
from .loader import *
from .resolver import *
from .enrich import *
from .analysis import *
from .image import *

__all__ = []
for module in (_core, _lexer, _parser, _loader, _resolver, _enrich, _analysis, _image):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['main', 'parse_args']
__all__ = list(dict.fromkeys(__all__))
