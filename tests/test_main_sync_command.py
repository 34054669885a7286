"""Regression tests for the `sync-instrument` command-line entrypoint."""

from __future__ import annotations

import sys

import pytest

from lot_ledger import main as main_module
from lot_ledger.domain import LedgerInvariantError
from lot_ledger.ledger import SyncResult


class _CorporateActionServiceStub:
    def __init__(self, error: Exception | None = None) -> None:
        self._error = error
        self.synced_names: list[str] = []

    def ledger_corporate_action_sync_instrument(self, instrument_name: str) -> SyncResult:
        self.synced_names.append(instrument_name)
        if self._error is not None:
            raise self._error
        return SyncResult(
            instrument_name=instrument_name,
            updated_count=2,
            message="restated 2 of 3 transactions from 1 corporate actions; commission, tax and realized P/L unchanged",
        )


class _ServicesStub:
    def __init__(self, corporate_action_service: _CorporateActionServiceStub) -> None:
        self.corporate_action_service = corporate_action_service


@pytest.fixture(autouse=True)
def _isolated_settings_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("API_MAX_LIMIT", raising=False)


def _main_install_services(monkeypatch: pytest.MonkeyPatch, service: _CorporateActionServiceStub) -> None:
    monkeypatch.setattr(main_module, "bootstrap_create_services", lambda settings: _ServicesStub(service))


def test_main_sync_instrument_prints_sync_summary(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run one sync and print the instrument with its summary message.

    Returns:
        None: Assertions validate command output.

    Raises:
        AssertionError: Raised when the command output deviates.
    """

    service = _CorporateActionServiceStub()
    _main_install_services(monkeypatch, service)
    monkeypatch.setattr(sys, "argv", ["lot-ledger", "sync-instrument", "--instrument-name", "ACME"])

    main_module.main()

    assert service.synced_names == ["ACME"]
    assert capsys.readouterr().out.startswith("ACME: restated 2 of 3 transactions")


def test_main_sync_instrument_exits_non_zero_on_ledger_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Exit with status 1 when restatement aborts."""

    _main_install_services(monkeypatch, _CorporateActionServiceStub(LedgerInvariantError("missing originals")))
    monkeypatch.setattr(sys, "argv", ["lot-ledger", "sync-instrument", "--instrument-name", "ACME"])

    with pytest.raises(SystemExit) as exit_info:
        main_module.main()

    assert exit_info.value.code == 1


def test_main_sync_instrument_requires_instrument_name(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject `sync-instrument` without `--instrument-name` as a usage error."""

    service = _CorporateActionServiceStub()
    _main_install_services(monkeypatch, service)
    monkeypatch.setattr(sys, "argv", ["lot-ledger", "sync-instrument"])

    with pytest.raises(SystemExit) as exit_info:
        main_module.main()

    assert exit_info.value.code == 2
    assert service.synced_names == []
