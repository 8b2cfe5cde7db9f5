from pathlib import Path

import pytest
from click.testing import CliRunner

import solind.api.export_data as export_data
import solind.cli as cli_mod
from conftest import PROGRAM, make_address
from solind.core.errors import FetchError
from solind.core.models import DecodeFailed, ExportOutput, ExportStats


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_mod, "setup_logging", lambda level: None)


def test_placeholder_program_id_exits_with_error(monkeypatch) -> None:
    monkeypatch.delenv("SOLIND_PROGRAM_ID", raising=False)

    result = CliRunner().invoke(cli_mod.cli, ["export"])

    assert result.exit_code == 1
    assert "Program ID is not set" in result.output


def test_summary_is_printed(monkeypatch) -> None:
    seen = {}

    async def fake_export(*, config, on_batch=None):
        seen["config"] = config
        on_batch(1, 1)
        return ExportOutput(
            stats=ExportStats(addresses=3, batches=1, decoded=2, failed=1, references_found=2),
            records=[],
            failures=[DecodeFailed(make_address(4), "bad layout")],
            csv_path=Path("output/time_stamped_accounts_x.csv"),
        )

    monkeypatch.setattr(export_data, "export_accounts", fake_export)

    result = CliRunner().invoke(
        cli_mod.cli,
        ["export", "--batch-size", "50", "--max-retries", "7"],
        env={"SOLIND_PROGRAM_ID": str(PROGRAM)},
    )

    assert result.exit_code == 0, result.output
    assert "decoded=2" in result.output
    assert "failed=1" in result.output
    assert "bad layout" in result.output
    assert "time_stamped_accounts_x.csv" in result.output
    config = seen["config"]
    assert config.program_id == str(PROGRAM)
    assert config.batch_size == 50
    assert config.rate_limits.max_retries == 7
    assert config.with_signatures is True


def test_fatal_fetch_error_exits_with_error(monkeypatch) -> None:
    async def fake_export(*, config, on_batch=None):
        raise FetchError("getMultipleAccounts failed for a batch of 100")

    monkeypatch.setattr(export_data, "export_accounts", fake_export)

    result = CliRunner().invoke(
        cli_mod.cli,
        ["export", "--no-signatures"],
        env={"SOLIND_PROGRAM_ID": str(PROGRAM)},
    )

    assert result.exit_code == 1
    assert "getMultipleAccounts failed" in result.output
