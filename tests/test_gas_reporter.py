from config.network_config import GasReporterConfig
from utils.gas_reporter import GasReporter
from tests.conftest import make_deployed


def _reporter(enabled=True, exclude=()):
    return GasReporter(GasReporterConfig(enabled=enabled, currency="USD", exclude_contracts=exclude), gas_price_wei=21)


def test_receipt_price_preferred_over_network_price():
    reporter = _reporter()
    row = reporter.record(make_deployed("TrikonToken", "0x1", gas_used=100, price=30_000_000_000))
    assert row.gas_price_wei == 30_000_000_000
    assert row.cost_wei == 3_000_000_000_000


def test_falls_back_to_network_price():
    reporter = _reporter()
    row = reporter.record(make_deployed("BuyNFT", "0x2", gas_used=100))
    assert row.cost_wei == 2100


def test_excluded_contracts_are_skipped():
    reporter = _reporter(exclude=("TrikonToken",))
    assert reporter.record(make_deployed("TrikonToken", "0x1")) is None
    assert reporter.rows == []


def test_render():
    reporter = _reporter()
    reporter.record(make_deployed("TrikonToken", "0x1", gas_used=1_000_000, price=2_000_000_000))
    reporter.record(make_deployed("BuyNFT", "0x2", gas_used=500_000, price=2_000_000_000))

    text = reporter.render()

    assert "currency: USD" in text
    assert "TrikonToken" in text and "BuyNFT" in text
    assert "0.002000" in text
    assert "Total gas used: 1500000" in text


def test_report_prints_only_when_enabled(capsys):
    reporter = _reporter(enabled=False)
    reporter.record(make_deployed("TrikonToken", "0x1"))
    reporter.report()
    assert capsys.readouterr().out == ""

    reporter = _reporter(enabled=True)
    reporter.record(make_deployed("TrikonToken", "0x1"))
    reporter.report()
    assert "TrikonToken" in capsys.readouterr().out
