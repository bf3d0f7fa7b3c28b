from pathlib import Path

import click

from dpay_deployment.types import ChecksumAddress, MinInt

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without asking for confirmation.",
    is_flag=True,
    default=False,
)

redeploy_option = click.option(
    "--redeploy/--reuse",
    help=(
        "Force fresh deployments, or reuse contracts recorded in the address book. "
        "Defaults to the params file setting, otherwise reuse."
    ),
    default=None,
)

delay_step_option = click.option(
    "--delay-step",
    help="Milliseconds to wait before each deployment.",
    type=MinInt(0),
    default=None,
)

params_filepath_option = click.option(
    "--params-filepath",
    "-p",
    help="Deployment params YAML; defaults to the one of the connected network.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-r",
    help="Address book to use; defaults to the project address book.",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)

user_option = click.option(
    "--user",
    "-u",
    help="Address to query; defaults to the selected account.",
    type=ChecksumAddress(),
    required=False,
)

amount_option = click.option(
    "--amount",
    help="Amount of whole tokens.",
    type=MinInt(1),
    default=10,
    show_default=True,
)
