"""Module wrappers around the functional losses.

The modules hold their configuration (reduction, delta) so they can be
created once, e.g. from a gin config, and called like any other
``torch.nn.Module`` during training.
"""

from collections.abc import Callable
from typing import ClassVar

import torch

from nnloss import losses
from nnloss.reduction import Reduction
from nnloss.typing_ import ReductionT


class Loss(torch.nn.Module):
    """Meta class for all losses with a configurable reduction."""

    default_reduction: ClassVar[Reduction] = Reduction.MEAN
    _function: ClassVar[Callable[..., torch.Tensor]]

    def __init__(self, reduction: ReductionT | None = None) -> None:
        """C'tor of Loss.

        Args:
            reduction: reduction applied to the elementwise loss. Falls back to
                the default of the wrapped function if not given.

        """
        super().__init__()
        self.reduction = Reduction.from_value(
            self.default_reduction if reduction is None else reduction,
        )

    def forward(self, predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
        """Evaluate the wrapped loss.

        Returns:
            Reduced loss.

        """
        return type(self)._function(predicted, expected, reduction=self.reduction)

    def extra_repr(self) -> str:
        """Show the reduction when printing the module."""
        name = getattr(self.reduction, "value", getattr(self.reduction, "__name__", "custom"))
        return f"reduction={name}"


class FixedReductionLoss(torch.nn.Module):
    """Meta class for losses which always average."""

    _function: ClassVar[Callable[..., torch.Tensor]]

    def forward(self, predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
        """Evaluate the wrapped loss.

        Returns:
            Scalar loss.

        """
        return type(self)._function(predicted, expected)


class L1Loss(Loss):
    """Module version of :func:`nnloss.losses.l1_loss`."""

    default_reduction = Reduction.SUM
    _function = staticmethod(losses.l1_loss)


class L2Loss(Loss):
    """Module version of :func:`nnloss.losses.l2_loss`."""

    default_reduction = Reduction.SUM
    _function = staticmethod(losses.l2_loss)


class MeanAbsoluteError(FixedReductionLoss):
    _function = staticmethod(losses.mean_absolute_error)


class MeanSquaredError(FixedReductionLoss):
    _function = staticmethod(losses.mean_squared_error)


class MeanSquaredLogarithmicError(FixedReductionLoss):
    _function = staticmethod(losses.mean_squared_logarithmic_error)


class MeanAbsolutePercentageError(FixedReductionLoss):
    _function = staticmethod(losses.mean_absolute_percentage_error)


class HingeLoss(Loss):
    _function = staticmethod(losses.hinge_loss)


class SquaredHingeLoss(Loss):
    _function = staticmethod(losses.squared_hinge_loss)


class CategoricalHingeLoss(Loss):
    _function = staticmethod(losses.categorical_hinge_loss)


class LogCoshLoss(Loss):
    _function = staticmethod(losses.log_cosh_loss)


class PoissonLoss(Loss):
    _function = staticmethod(losses.poisson_loss)


class KLDivergence(Loss):
    """Module version of :func:`nnloss.losses.kullback_leibler_divergence`."""

    default_reduction = Reduction.SUM
    _function = staticmethod(losses.kullback_leibler_divergence)


class SoftmaxCrossEntropy(Loss):
    """Softmax cross entropy accepting class indices or probabilities."""

    _function = staticmethod(losses.softmax_cross_entropy)


class SigmoidCrossEntropy(Loss):
    _function = staticmethod(losses.sigmoid_cross_entropy)


class HuberLoss(Loss):
    """Module version of :func:`nnloss.losses.huber_loss`."""

    default_reduction = Reduction.SUM

    def __init__(self, delta: float = 1.0, reduction: ReductionT | None = None) -> None:
        """C'tor of HuberLoss.

        Args:
            delta: point where the loss changes from quadratic to linear.
            reduction: reduction applied to the elementwise loss.

        """
        super().__init__(reduction)
        self.delta = delta

    def forward(self, predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
        """Evaluate the Huber loss with the stored delta.

        Returns:
            Reduced loss.

        """
        return losses.huber_loss(
            predicted,
            expected,
            delta=self.delta,
            reduction=self.reduction,
        )

    def extra_repr(self) -> str:
        """Show delta and reduction when printing the module."""
        return f"delta={self.delta}, {super().extra_repr()}"


__all__ = [
    "CategoricalHingeLoss",
    "FixedReductionLoss",
    "HingeLoss",
    "HuberLoss",
    "KLDivergence",
    "L1Loss",
    "L2Loss",
    "LogCoshLoss",
    "Loss",
    "MeanAbsoluteError",
    "MeanAbsolutePercentageError",
    "MeanSquaredError",
    "MeanSquaredLogarithmicError",
    "PoissonLoss",
    "SigmoidCrossEntropy",
    "SoftmaxCrossEntropy",
    "SquaredHingeLoss",
]
