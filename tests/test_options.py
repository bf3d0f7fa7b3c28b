import click
from click.testing import CliRunner

from dpay_deployment.constants import ADDRESS_BOOK_FILENAME, ARTIFACTS_DIR
from dpay_deployment.db import Database
from dpay_deployment.options import (
    delay_step_option,
    params_filepath_option,
    redeploy_option,
    registry_filepath_option,
)

from tests.conftest import NETWORK, address


@click.command()
@params_filepath_option
@registry_filepath_option
@redeploy_option
@delay_step_option
def show(params_filepath, registry_filepath, redeploy, delay_step):
    db = Database(registry_filepath)
    click.echo(f"params={params_filepath}")
    click.echo(f"book={db.filepath}")
    click.echo(f"record={db.read(NETWORK, 'RewardManager')}")
    click.echo(f"redeploy={redeploy} delay_step={delay_step}")


def test_defaults():
    result = CliRunner().invoke(show, [])
    assert result.exit_code == 0, result.output
    assert "params=None" in result.output
    assert f"book={ARTIFACTS_DIR / ADDRESS_BOOK_FILENAME}" in result.output
    assert "redeploy=None delay_step=None" in result.output


def test_registry_filepath_selects_address_book(tmp_path):
    book = tmp_path / "staging" / "addresses.json"
    Database(book).write(NETWORK, "RewardManager", address(7))

    result = CliRunner().invoke(show, ["--registry-filepath", str(book)])
    assert result.exit_code == 0, result.output
    assert f"book={book}" in result.output
    assert f"record={address(7)}" in result.output


def test_deployment_overrides(tmp_path):
    params = tmp_path / "modules.yml"
    params.write_text("deployment: {}\n")

    result = CliRunner().invoke(
        show, ["-p", str(params), "--reuse", "--delay-step", "250"]
    )
    assert result.exit_code == 0, result.output
    assert f"params={params}" in result.output
    assert "redeploy=False delay_step=250" in result.output


def test_negative_delay_step_is_rejected():
    result = CliRunner().invoke(show, ["--delay-step", "-1"])
    assert result.exit_code == 2
    assert "less than the minimum allowed value of 0" in result.output
