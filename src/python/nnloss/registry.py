"""Lookup of losses by name and a gin configurable way to build them."""

import functools

import torch

from nnloss import losses
from nnloss.configuration import configurable
from nnloss.reduction import Reduction
from nnloss.typing_ import LossFnT

_LOSSES: dict[str, LossFnT] = {name: getattr(losses, name) for name in losses.__all__}

# These always average, a reduction cannot be passed.
_FIXED_REDUCTION = frozenset({
    "mean_absolute_error",
    "mean_absolute_percentage_error",
    "mean_squared_error",
    "mean_squared_logarithmic_error",
})


def available_losses() -> list[str]:
    """Names which can be passed to :func:`get_loss`.

    Returns:
        Sorted list of registered loss names.

    """
    return sorted(_LOSSES)


def get_loss(name: str) -> LossFnT:
    """Return the loss function registered under ``name``.

    Raises:
        ValueError: in case no loss with that name exists.

    Returns:
        The functional loss.

    """
    try:
        return _LOSSES[name]
    except KeyError:
        msg = f"Unknown loss '{name}'. Available losses: {available_losses()}"
        raise ValueError(msg) from None


@configurable
class LossConfig:
    """Configuration of a single loss.

    Bind the fields in a gin file, e.g. ``LossConfig.name = "huber_loss"``.
    """

    name: str = "mean_squared_error"
    reduction: str | None = None  # None keeps the default of the loss
    delta: float = 1.0  # Only used by huber_loss

    def build(self) -> LossFnT:
        """Bind the configured parameters to the selected loss.

        Raises:
            ValueError: for a fixed reduction loss combined with a reduction,
                or a non positive delta.

        Returns:
            Callable taking the predicted and expected tensors.

        """
        fn = get_loss(self.name)
        kwargs = {}

        if self.reduction is not None:
            if self.name in _FIXED_REDUCTION:
                msg = f"Loss '{self.name}' always averages, got reduction={self.reduction}."
                raise ValueError(msg)
            kwargs["reduction"] = Reduction.from_value(self.reduction)

        if self.name == "huber_loss":
            if self.delta <= 0:
                msg = f"Huber loss needs a positive delta, got {self.delta}."
                raise ValueError(msg)
            kwargs["delta"] = self.delta

        return functools.partial(fn, **kwargs)

    def __call__(self, predicted: torch.Tensor, expected: torch.Tensor) -> torch.Tensor:
        """Build and evaluate the configured loss.

        Returns:
            Reduced loss.

        """
        return self.build()(predicted, expected)


__all__ = ["LossConfig", "available_losses", "get_loss"]
