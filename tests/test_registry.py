import gin
import pytest
import torch

from nnloss import LossConfig, available_losses, get_loss, losses, parse_gin_config


def test_every_functional_loss_is_registered():
    assert available_losses() == sorted(losses.__all__)
    assert get_loss("huber_loss") is losses.huber_loss


def test_unknown_loss_lists_alternatives():
    with pytest.raises(ValueError, match="Unknown loss 'l3_loss'.*l1_loss"):
        get_loss("l3_loss")


def test_default_config_is_mean_squared_error(predicted, expected):
    config = LossConfig()
    torch.testing.assert_close(
        config(predicted, expected), losses.mean_squared_error(predicted, expected),
    )


def test_config_binds_reduction_and_delta(predicted, expected):
    config = LossConfig(name="huber_loss", reduction="mean", delta=0.3)
    torch.testing.assert_close(
        config.build()(predicted, expected),
        losses.huber_loss(predicted, expected, delta=0.3, reduction="mean"),
    )


def test_config_rejects_reduction_for_fixed_losses():
    with pytest.raises(ValueError, match="always averages"):
        LossConfig(name="mean_absolute_error", reduction="sum").build()


def test_config_rejects_non_positive_delta():
    with pytest.raises(ValueError, match="positive delta"):
        LossConfig(name="huber_loss", delta=0.0).build()


def test_config_rejects_unknown_reduction():
    with pytest.raises(ValueError, match="Unknown reduction"):
        LossConfig(name="l1_loss", reduction="median").build()


def test_gin_bindings_reach_loss_config(predicted, expected):
    gin.parse_config(["LossConfig.name = 'l1_loss'", "LossConfig.reduction = 'mean'"])
    config = LossConfig()
    assert config.name == "l1_loss"
    torch.testing.assert_close(
        config(predicted, expected), losses.mean_absolute_error(predicted, expected),
    )


def test_parse_gin_config_reports_bindings(tmp_path, capsys):
    config_path = tmp_path / "loss.gin"
    config_path.write_text("LossConfig.name = 'log_cosh_loss'\nLossConfig.delta = 2.0\n")

    explicitly_set = parse_gin_config(config_path)

    assert explicitly_set == {
        "LossConfig.name": "'log_cosh_loss'",
        "LossConfig.delta": "2.0",
    }
    assert "Gin configuration" in capsys.readouterr().out
    assert LossConfig().name == "log_cosh_loss"


def test_parse_gin_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        parse_gin_config(tmp_path / "missing.gin")
