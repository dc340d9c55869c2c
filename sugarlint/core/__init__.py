from .diagnostics import Correction, Diagnostic
from .source_file import SourceFile
from .span import Span

__all__ = ["Correction", "Diagnostic", "SourceFile", "Span"]
