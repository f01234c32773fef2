# Generation options, selection and template modules.
# The pipeline and strategies import the index and similarity modules, so
# they are imported from their own modules rather than re-exported here.
from .config import GenerationOptions, SimilarityWeights
from .sampler import TrackSampler, make_rng
from . import templates

__all__ = [
    "GenerationOptions",
    "SimilarityWeights",
    "TrackSampler",
    "make_rng",
    "templates",
]
