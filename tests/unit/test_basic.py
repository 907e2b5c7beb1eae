"""Basic tests to verify project setup."""


def test_import_netpingpong():
    """Test that netpingpong package can be imported."""
    import netpingpong

    assert netpingpong.__version__ == "0.1.0"


def test_import_cli():
    """Test that CLI module can be imported."""
    from netpingpong import cli

    assert cli.app is not None


def test_import_relay():
    """Test that the relay application can be built."""
    from netpingpong.relay import create_app

    assert create_app() is not None


def test_import_models():
    """Test that models module can be imported."""
    from netpingpong import models

    assert models.NodeRecord is not None
    assert models.ProbeOutcome is not None
