"""Implements loss functions.

Every loss compares ``predicted`` (or ``logits``) against ``expected`` (or
``labels``/``probabilities``) elementwise and applies ``reduction`` to the
result. Gradients are only meaningful with respect to the first argument. No
input validation happens here, shape and domain errors are whatever torch
reports for the offending operation.
"""

import math

import torch
import torch.nn.functional as F  # noqa: N812

from nnloss.primitives import SoftmaxCrossEntropy, SparseSoftmaxCrossEntropy
from nnloss.reduction import Reduction, reduce
from nnloss.typing_ import ReductionT


def l1_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.SUM,
) -> torch.Tensor:
    """L1 loss, ``reduction(abs(expected - predicted))``.

    Args:
        predicted: outputs of a neural network.
        expected: targets corresponding to the correct output.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    return reduce(torch.abs(expected - predicted), reduction)


def l2_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.SUM,
) -> torch.Tensor:
    """L2 loss, ``reduction((expected - predicted) ** 2)``.

    Args:
        predicted: outputs of a neural network.
        expected: targets corresponding to the correct output.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    return reduce(torch.square(expected - predicted), reduction)


def mean_absolute_error(predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
    """Mean of the absolute difference between targets and predictions."""
    return l1_loss(predicted, expected, reduction=Reduction.MEAN)


def mean_squared_error(predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
    """Mean of the squared difference between targets and predictions."""
    return l2_loss(predicted, expected, reduction=Reduction.MEAN)


def mean_squared_logarithmic_error(
    predicted: torch.Tensor,
    expected: torch.Tensor,
) -> torch.Tensor:
    """Mean squared error between ``log(x + 1)`` of predictions and targets.

    Negative entries of either tensor are clamped at 0 beforehand, since the
    logarithm is undefined for them. This changes the loss for negative inputs
    without any warning.

    Returns:
        Scalar loss.

    """
    log_predicted = torch.log(torch.clamp(predicted, min=0) + 1)
    log_expected = torch.log(torch.clamp(expected, min=0) + 1)
    return l2_loss(log_predicted, log_expected, reduction=Reduction.MEAN)


def mean_absolute_percentage_error(
    predicted: torch.Tensor,
    expected: torch.Tensor,
) -> torch.Tensor:
    """Computes ``100 * mean(abs((expected - predicted) / abs(expected)))``.

    Zero targets produce ``inf`` or ``nan``.

    Returns:
        Scalar loss in percent.

    """
    return 100 * torch.abs((expected - predicted) / torch.abs(expected)).mean()


def hinge_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Hinge loss, ``reduction(max(0, 1 - predicted * expected))``.

    Args:
        predicted: outputs of a neural network.
        expected: targets, expected to be -1 or 1.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    return reduce(torch.clamp(1 - expected * predicted, min=0), reduction)


def squared_hinge_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Squared hinge loss, ``reduction(max(0, 1 - predicted * expected) ** 2)``.

    Args:
        predicted: outputs of a neural network.
        expected: targets, expected to be -1 or 1.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    hinge = hinge_loss(predicted, expected, reduction=Reduction.IDENTITY)
    return reduce(torch.square(hinge), reduction)


def categorical_hinge_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Categorical hinge loss over the trailing (class) axis.

    Computes ``max(0, negative - positive + 1)`` with
    ``positive = sum(expected * predicted)`` and
    ``negative = max((1 - expected) * predicted)`` along the last axis.

    Args:
        predicted: outputs of a neural network, shape ``(..., num_classes)``.
        expected: one-hot targets of the same shape.
        reduction: reduction applied over the remaining axes.

    Returns:
        Reduced loss.

    """
    positive = (expected * predicted).sum(dim=-1)
    negative = ((1 - expected) * predicted).amax(dim=-1)
    return reduce(torch.clamp(negative - positive + 1, min=0), reduction)


def log_cosh_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Logarithm of the hyperbolic cosine of ``predicted - expected``.

    Uses ``x + softplus(-2x) - log(2)``, which equals ``log(cosh(x))`` but does
    not overflow for large errors.

    Returns:
        Reduced loss.

    """
    x = predicted - expected
    return reduce(x + F.softplus(-2 * x) - math.log(2.0), reduction)


def poisson_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Poisson loss, ``reduction(predicted - expected * log(predicted))``.

    Returns:
        Reduced loss.

    """
    return reduce(predicted - expected * torch.log(predicted), reduction)


def kullback_leibler_divergence(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    reduction: ReductionT = Reduction.SUM,
) -> torch.Tensor:
    """KL divergence, ``reduction(expected * log(expected / predicted))``.

    Args:
        predicted: predicted distribution.
        expected: target distribution.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    return reduce(expected * torch.log(expected / predicted), reduction)


def sparse_softmax_cross_entropy(
    logits: torch.Tensor,
    labels: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Softmax cross entropy between logits and integer class indices.

    Args:
        logits: unscaled log probabilities of shape ``(..., num_classes)``.
        labels: zero based indices of the correct class, shape ``(...)``.
        reduction: reduction applied to the per example loss.

    Returns:
        Reduced loss.

    """
    return reduce(SparseSoftmaxCrossEntropy.apply(logits, labels), reduction)


def dense_softmax_cross_entropy(
    logits: torch.Tensor,
    probabilities: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Softmax cross entropy between logits and target distributions.

    Args:
        logits: unscaled log probabilities of shape ``(..., num_classes)``.
        probabilities: same shape as ``logits``, each row a valid distribution.
        reduction: reduction applied to the per example loss.

    Returns:
        Reduced loss.

    """
    return reduce(SoftmaxCrossEntropy.apply(logits, probabilities), reduction)


def softmax_cross_entropy(
    logits: torch.Tensor,
    labels: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Softmax cross entropy picking the label encoding from the dtype.

    Integer ``labels`` are read as class indices, floating point ``labels`` as
    probabilities.

    Returns:
        Reduced loss.

    """
    if labels.dtype.is_floating_point:
        return dense_softmax_cross_entropy(logits, labels, reduction=reduction)
    return sparse_softmax_cross_entropy(logits, labels, reduction=reduction)


def sigmoid_cross_entropy(
    logits: torch.Tensor,
    labels: torch.Tensor,
    reduction: ReductionT = Reduction.MEAN,
) -> torch.Tensor:
    """Binary cross entropy between logits and labels.

    Evaluated as ``max(logits, 0) - logits * labels + log1p(exp(-abs(logits)))``
    so ``exp`` never sees a large positive argument. The reduction runs over
    all elements; scale the result if a per batch average is intended.

    Args:
        logits: unscaled outputs of a neural network.
        labels: targets in ``[0, 1]`` of the same shape.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    max_logits_with_zero = torch.maximum(logits, torch.zeros_like(logits))
    # maximum instead of abs keeps the gradient at 0 equal to sigmoid(0) - labels
    neg_abs_logits = torch.maximum(logits, -logits)
    return reduce(
        max_logits_with_zero - logits * labels + torch.log1p(torch.exp(-neg_abs_logits)),
        reduction,
    )


def huber_loss(
    predicted: torch.Tensor,
    expected: torch.Tensor,
    delta: float = 1.0,
    reduction: ReductionT = Reduction.SUM,
) -> torch.Tensor:
    """Huber loss, quadratic for small and linear for large errors.

    For every ``x`` in ``expected - predicted`` the loss is ``0.5 * x**2`` if
    ``abs(x) <= delta`` and ``0.5 * delta**2 + delta * (abs(x) - delta)``
    otherwise. See https://en.wikipedia.org/wiki/Huber_loss.

    Args:
        predicted: outputs of a neural network.
        expected: targets corresponding to the correct output.
        delta: point where the loss changes from quadratic to linear.
        reduction: reduction applied to the elementwise loss.

    Returns:
        Reduced loss.

    """
    abs_error = torch.abs(expected - predicted)
    quadratic = torch.clamp(abs_error, max=delta)
    linear = abs_error - quadratic
    return reduce(0.5 * quadratic * quadratic + delta * linear, reduction)


__all__ = [
    "categorical_hinge_loss",
    "dense_softmax_cross_entropy",
    "hinge_loss",
    "huber_loss",
    "kullback_leibler_divergence",
    "l1_loss",
    "l2_loss",
    "log_cosh_loss",
    "mean_absolute_error",
    "mean_absolute_percentage_error",
    "mean_squared_error",
    "mean_squared_logarithmic_error",
    "poisson_loss",
    "sigmoid_cross_entropy",
    "softmax_cross_entropy",
    "sparse_softmax_cross_entropy",
    "squared_hinge_loss",
]
