"""Reductions collapsing an elementwise loss tensor."""

from collections.abc import Callable
from enum import Enum

import torch


class Reduction(Enum):
    """Defines how an elementwise loss is collapsed.

    Members are callable, so ``Reduction.MEAN(loss)`` is the same as ``loss.mean()``.
    Gradients flow through the underlying torch reduction.
    """

    SUM = "sum"  # Sum over every element
    MEAN = "mean"  # Average over every element
    IDENTITY = "none"  # Keep the elementwise values

    def __call__(self, values: torch.Tensor) -> torch.Tensor:
        """Apply the reduction.

        Args:
            values: elementwise loss values.

        Returns:
            A scalar tensor for SUM and MEAN, the input itself for IDENTITY.

        """
        if self is Reduction.SUM:
            return values.sum()
        if self is Reduction.MEAN:
            return values.mean()
        return values

    @classmethod
    def from_value(
        cls,
        value: "Reduction | str | Callable[[torch.Tensor], torch.Tensor]",
    ) -> "Reduction | Callable[[torch.Tensor], torch.Tensor]":
        """Resolve a reduction given as member, name or callable.

        Raises:
            ValueError: for an unknown name or a value which is not callable.

        Args:
            value: enum member, one of ``"sum"``, ``"mean"``, ``"none"``,
                ``"identity"`` or a custom differentiable callable.

        Returns:
            Something which can be called on the elementwise loss.

        """
        if isinstance(value, Reduction):
            return value

        if isinstance(value, str):
            name = value.strip().lower()
            if name == "identity":
                return cls.IDENTITY
            try:
                return cls(name)
            except ValueError:
                names = sorted([m.value for m in cls] + ["identity"])
                msg = f"Unknown reduction '{value}', expected one of {names}."
                raise ValueError(msg) from None

        if not callable(value):
            msg = f"Reduction needs to be callable, got {type(value).__name__}."
            raise ValueError(msg)

        return value


def reduce(
    values: torch.Tensor,
    reduction: "Reduction | str | Callable[[torch.Tensor], torch.Tensor]",
) -> torch.Tensor:
    """Resolve ``reduction`` and apply it to ``values``.

    Returns:
        The reduced loss.

    """
    return Reduction.from_value(reduction)(values)


__all__ = ["Reduction", "reduce"]
