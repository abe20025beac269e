"""Fused cross entropy primitives computing loss and gradient in one pass.

Both primitives work on detached tensors and return the per example loss
together with its gradient with respect to the logits. The autograd functions
below store that gradient and reuse it during the backward pass, which is the
only place in the package where the chain rule is wired by hand.
"""

import torch
from pydantic import BaseModel, ConfigDict, model_validator


class FusedResult(BaseModel):
    """Loss value and logits gradient produced by a fused primitive."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    value: torch.Tensor
    gradient: torch.Tensor

    @model_validator(mode="after")
    def shape_checker(self) -> "FusedResult":
        """Check that the gradient carries one more trailing axis than the value.

        Raises:
            ValueError: in case the shapes do not line up.

        Returns:
            The validated result.

        """
        if self.gradient.shape[:-1] != self.value.shape:
            msg = (
                f"Gradient of shape {tuple(self.gradient.shape)} does not match "
                f"loss of shape {tuple(self.value.shape)} along the leading axes."
            )
            raise ValueError(msg)

        return self


def sparse_softmax_cross_entropy_with_logits(
    logits: torch.Tensor,
    labels: torch.Tensor,
) -> FusedResult:
    """Softmax cross entropy against integer class indices.

    Args:
        logits: unscaled scores of shape ``(..., num_classes)``.
        labels: class indices of shape ``(...)``.

    Returns:
        Loss of shape ``(...)`` and gradient of shape ``(..., num_classes)``.

    """
    with torch.no_grad():
        logits = logits.detach()
        indices = labels.detach().long()
        log_probs = torch.log_softmax(logits, dim=-1)
        value = -log_probs.gather(-1, indices.unsqueeze(-1)).squeeze(-1)
        one_hot = torch.nn.functional.one_hot(indices, logits.shape[-1])
        gradient = log_probs.exp() - one_hot.to(logits.dtype)

    return FusedResult(value=value, gradient=gradient)


def softmax_cross_entropy_with_logits(
    logits: torch.Tensor,
    probabilities: torch.Tensor,
) -> FusedResult:
    """Softmax cross entropy against a probability distribution per row.

    Args:
        logits: unscaled scores of shape ``(..., num_classes)``.
        probabilities: target distribution of the same shape as ``logits``.

    Returns:
        Loss of shape ``(...)`` and gradient of the shape of ``logits``.

    """
    with torch.no_grad():
        logits = logits.detach()
        probabilities = probabilities.detach().to(logits.dtype)
        log_probs = torch.log_softmax(logits, dim=-1)
        value = -(probabilities * log_probs).sum(dim=-1)
        gradient = log_probs.exp() - probabilities

    return FusedResult(value=value, gradient=gradient)


class SparseSoftmaxCrossEntropy(torch.autograd.Function):
    """Autograd wrapper of the sparse fused primitive."""

    @staticmethod
    def forward(ctx, logits: torch.Tensor, labels: torch.Tensor) -> torch.Tensor:  # noqa: ANN001
        result = sparse_softmax_cross_entropy_with_logits(logits, labels)
        ctx.save_for_backward(result.gradient)
        return result.value

    @staticmethod
    def backward(ctx, grad_output: torch.Tensor) -> tuple[torch.Tensor, None]:  # noqa: ANN001
        (gradient,) = ctx.saved_tensors
        return grad_output.unsqueeze(-1) * gradient, None


class SoftmaxCrossEntropy(torch.autograd.Function):
    """Autograd wrapper of the dense fused primitive."""

    @staticmethod
    def forward(
        ctx,  # noqa: ANN001
        logits: torch.Tensor,
        probabilities: torch.Tensor,
    ) -> torch.Tensor:
        result = softmax_cross_entropy_with_logits(logits, probabilities)
        ctx.save_for_backward(result.gradient)
        return result.value

    @staticmethod
    def backward(ctx, grad_output: torch.Tensor) -> tuple[torch.Tensor, None]:  # noqa: ANN001
        (gradient,) = ctx.saved_tensors
        # Probabilities are treated as constants.
        return grad_output.unsqueeze(-1) * gradient, None


__all__ = [
    "FusedResult",
    "SoftmaxCrossEntropy",
    "SparseSoftmaxCrossEntropy",
    "softmax_cross_entropy_with_logits",
    "sparse_softmax_cross_entropy_with_logits",
]
