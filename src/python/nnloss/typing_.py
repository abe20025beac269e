"""Definiton of some types to make typing of losses more apparent and easier to read."""

from collections.abc import Callable
from typing import TypeAlias

import torch

from nnloss.reduction import Reduction

ReductionFnT: TypeAlias = Callable[[torch.Tensor], torch.Tensor]
ReductionT: TypeAlias = Reduction | str | ReductionFnT
LossFnT: TypeAlias = Callable[..., torch.Tensor]
