import click
import pytest

from dpay_deployment.types import ChecksumAddress, MinInt

from tests.conftest import address


def test_min_int():
    param_type = MinInt(1)
    assert param_type.convert("10", None, None) == 10
    assert param_type.convert(1, None, None) == 1

    with pytest.raises(click.BadParameter, match="less than the minimum allowed value of 1"):
        param_type.convert("0", None, None)
    with pytest.raises(click.BadParameter, match="not a valid integer"):
        param_type.convert("ten", None, None)


def test_checksum_address():
    param_type = ChecksumAddress()
    assert param_type.convert(address(0xABCDEF).lower(), None, None) == address(0xABCDEF)

    with pytest.raises(click.BadParameter, match="not a valid ethereum address"):
        param_type.convert("0x1234", None, None)
