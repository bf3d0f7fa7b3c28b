import importlib.util
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


def _load_script(relative_path):
    filepath = SCRIPTS_DIR / relative_path
    spec = importlib.util.spec_from_file_location(filepath.stem, filepath)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _option_names(script):
    return {param.name for param in script.cli.params}


def test_claim_usage_hint(capsys):
    _load_script("interact.py")._print_usage()
    output = capsys.readouterr().out
    assert "claim_reward.claimReward(claim_data, signature, sender=user)" in output
    assert "1. A valid signature from a SIGNER" in output


def test_deploy_modules_options():
    assert {"params_filepath", "redeploy", "delay_step", "autosign"} <= _option_names(
        _load_script("deploy_modules.py")
    )


@pytest.mark.parametrize(
    "relative_path",
    [
        "interact.py",
        "verify_roles.py",
        "deploy_token.py",
        "rewards/deploy_reward_vault.py",
        "rewards/deploy_reward_manager.py",
        "rewards/deploy_vault.py",
        "rewards/get_points.py",
        "rewards/transfer_fund.py",
    ],
)
def test_address_book_is_selectable(relative_path):
    assert "registry_filepath" in _option_names(_load_script(relative_path))
