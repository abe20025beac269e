import numpy as np
import pytest
import torch
from pydantic import ValidationError
from scipy.special import log_softmax, softmax

from nnloss.primitives import (
    FusedResult,
    SoftmaxCrossEntropy,
    SparseSoftmaxCrossEntropy,
    softmax_cross_entropy_with_logits,
    sparse_softmax_cross_entropy_with_logits,
)


@pytest.fixture
def logits(generator):
    return torch.randn(5, 4, generator=generator, dtype=torch.float64)


@pytest.fixture
def labels(generator):
    return torch.randint(0, 4, (5,), generator=generator)


def test_sparse_value_and_gradient(logits, labels):
    result = sparse_softmax_cross_entropy_with_logits(logits, labels)

    ref_log_probs = log_softmax(logits.numpy(), axis=-1)
    ref_value = -ref_log_probs[np.arange(5), labels.numpy()]
    ref_grad = softmax(logits.numpy(), axis=-1)
    ref_grad[np.arange(5), labels.numpy()] -= 1

    np.testing.assert_allclose(result.value.numpy(), ref_value)
    np.testing.assert_allclose(result.gradient.numpy(), ref_grad)


def test_dense_value_and_gradient(logits, generator):
    probabilities = torch.softmax(
        torch.randn(5, 4, generator=generator, dtype=torch.float64), dim=-1,
    )
    result = softmax_cross_entropy_with_logits(logits, probabilities)

    ref_value = -(probabilities.numpy() * log_softmax(logits.numpy(), axis=-1)).sum(-1)
    ref_grad = softmax(logits.numpy(), axis=-1) - probabilities.numpy()

    np.testing.assert_allclose(result.value.numpy(), ref_value)
    np.testing.assert_allclose(result.gradient.numpy(), ref_grad)


def test_sparse_accepts_int32_labels(logits, labels):
    as_int64 = sparse_softmax_cross_entropy_with_logits(logits, labels)
    as_int32 = sparse_softmax_cross_entropy_with_logits(logits, labels.to(torch.int32))
    torch.testing.assert_close(as_int64.value, as_int32.value)


def test_primitives_keep_trailing_batch_axes(generator):
    logits = torch.randn(2, 3, 6, generator=generator)
    labels = torch.randint(0, 6, (2, 3), generator=generator)
    result = sparse_softmax_cross_entropy_with_logits(logits, labels)
    assert result.value.shape == (2, 3)
    assert result.gradient.shape == (2, 3, 6)


def test_primitives_do_not_track_gradients(logits, labels):
    logits.requires_grad_(True)
    result = sparse_softmax_cross_entropy_with_logits(logits, labels)
    assert not result.value.requires_grad
    assert not result.gradient.requires_grad


def test_fused_result_rejects_mismatching_shapes():
    with pytest.raises(ValidationError, match="does not match"):
        FusedResult(value=torch.zeros(3), gradient=torch.zeros(4, 2))


def test_backward_scales_stored_gradient(logits, labels):
    logits.requires_grad_(True)
    weights = torch.arange(1.0, 6.0, dtype=torch.float64)
    (SparseSoftmaxCrossEntropy.apply(logits, labels) * weights).sum().backward()

    expected_grad = sparse_softmax_cross_entropy_with_logits(logits, labels).gradient
    torch.testing.assert_close(logits.grad, weights[:, None] * expected_grad)


def test_gradcheck_sparse(logits, labels):
    logits.requires_grad_(True)
    assert torch.autograd.gradcheck(
        lambda x: SparseSoftmaxCrossEntropy.apply(x, labels), (logits,),
    )


def test_gradcheck_dense(logits):
    logits.requires_grad_(True)
    probabilities = torch.tensor([0.1, 0.2, 0.3, 0.4], dtype=torch.float64).expand(5, 4)
    assert torch.autograd.gradcheck(
        lambda x: SoftmaxCrossEntropy.apply(x, probabilities), (logits,),
    )


def test_dense_probabilities_are_constant(logits):
    logits.requires_grad_(True)
    probabilities = torch.full((5, 4), 0.25, dtype=torch.float64, requires_grad=True)
    SoftmaxCrossEntropy.apply(logits, probabilities).sum().backward()
    assert logits.grad is not None
    assert probabilities.grad is None
