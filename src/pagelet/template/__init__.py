"""pagelet template package: evaluation and rendering of parsed trees."""

from pagelet.template.core import Template
from pagelet.template.evaluator import Evaluator
from pagelet.template.renderer import Renderer

__all__ = ["Evaluator", "Renderer", "Template"]
