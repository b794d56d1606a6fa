"""Bayesian fitting of axis-aligned bounding boxes to 3D point clouds."""

__version__ = "0.1.0"

from . import errors
from . import geometry
from . import inference
from . import data
from . import eval
from . import utils

from .pipeline import BoxFitPipeline, FitResult
