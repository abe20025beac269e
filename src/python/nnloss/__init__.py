"""Main init organising the loss catalogue."""

from . import losses, modules
from .configuration import configurable, parse_gin_config
from .losses import (
    categorical_hinge_loss,
    dense_softmax_cross_entropy,
    hinge_loss,
    huber_loss,
    kullback_leibler_divergence,
    l1_loss,
    l2_loss,
    log_cosh_loss,
    mean_absolute_error,
    mean_absolute_percentage_error,
    mean_squared_error,
    mean_squared_logarithmic_error,
    poisson_loss,
    sigmoid_cross_entropy,
    softmax_cross_entropy,
    sparse_softmax_cross_entropy,
    squared_hinge_loss,
)
from .reduction import Reduction
from .registry import LossConfig, available_losses, get_loss

__all__ = [
    "LossConfig",
    "Reduction",
    "available_losses",
    "categorical_hinge_loss",
    "configurable",
    "dense_softmax_cross_entropy",
    "get_loss",
    "hinge_loss",
    "huber_loss",
    "kullback_leibler_divergence",
    "l1_loss",
    "l2_loss",
    "log_cosh_loss",
    "losses",
    "mean_absolute_error",
    "mean_absolute_percentage_error",
    "mean_squared_error",
    "mean_squared_logarithmic_error",
    "modules",
    "parse_gin_config",
    "poisson_loss",
    "sigmoid_cross_entropy",
    "softmax_cross_entropy",
    "sparse_softmax_cross_entropy",
    "squared_hinge_loss",
]
