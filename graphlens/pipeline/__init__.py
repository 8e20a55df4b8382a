"""Response normalization pipeline."""

from graphlens.pipeline.diagnostics import Diagnostics
from graphlens.pipeline.processor import process_model_output

__all__ = ["Diagnostics", "process_model_output"]
