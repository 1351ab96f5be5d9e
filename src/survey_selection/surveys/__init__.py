from .gama_params import gama
from .devils_params import devils
from .waves_params import waves_g23
from .deep_optical_params import deep_optical

BUILTIN_SURVEYS = (gama, devils, waves_g23, deep_optical)
