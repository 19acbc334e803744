"""End-to-end CLI tests over a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from stockbill.infrastructure.cli import invoice_commands
from stockbill.infrastructure.cli.main import cli
from stockbill.infrastructure.logging_config import reset_logging
from tests.fakes import FakeMessagingGateway


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def run(data_dir, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    env = {"STOCKBILL_DATA_DIR": str(data_dir), "STOCKBILL_INVOICE_DIR": str(tmp_path / "pdf")}

    def invoke(*args):
        # each invocation installs its own handler on the runner's stderr
        reset_logging()
        return runner.invoke(cli, list(args), env=env)

    return invoke


def _product_ids(data_dir) -> dict[str, str]:
    records = json.loads((data_dir / "products.json").read_text(encoding="utf-8"))
    return {r["name"]: r["id"] for r in records}


def _invoice_ids(data_dir) -> list[str]:
    records = json.loads((data_dir / "invoices.json").read_text(encoding="utf-8"))
    return [r["id"] for r in records]


class TestProductCommands:

    def test_add_then_list(self, run):
        result = run("product", "add", "--name", "Soap", "--quantity", "10", "--price", "10")
        assert result.exit_code == 0, result.output
        assert "added" in result.output

        result = run("product", "list")
        assert result.exit_code == 0
        assert "Soap" in result.output
        assert "₹10.00" in result.output

    def test_re_add_restocks(self, run, data_dir):
        run("product", "add", "--name", "Soap", "--quantity", "10", "--price", "10")
        result = run("product", "add", "--name", "Soap", "--quantity", "5", "--price", "12")

        assert "restocked to 15" in result.output
        assert len(_product_ids(data_dir)) == 1

    def test_update_and_show(self, run, data_dir):
        run("product", "add", "--name", "Soap", "--quantity", "10", "--price", "10")
        pid = _product_ids(data_dir)["Soap"]

        result = run("product", "update", "--id", pid, "--category", "Toiletries")
        assert result.exit_code == 0, result.output

        result = run("product", "show", "--id", pid)
        assert "Toiletries" in result.output

    def test_delete_missing(self, run):
        result = run("product", "delete", "--id", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_search(self, run):
        run("product", "add", "--name", "Soap", "--quantity", "1", "--price", "10")
        run("product", "add", "--name", "Bandage", "--quantity", "1", "--price", "5")

        result = run("product", "search", "soa")
        assert "Soap" in result.output
        assert "Bandage" not in result.output


class TestInvoiceCommands:

    def _stock_soap(self, run, data_dir) -> str:
        run("product", "add", "--name", "Soap", "--quantity", "10", "--price", "10")
        return _product_ids(data_dir)["Soap"]

    def test_issue_with_default_tax(self, run, data_dir):
        pid = self._stock_soap(run, data_dir)

        result = run(
            "invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:2"
        )

        assert result.exit_code == 0, result.output
        assert "₹3.60" in result.output
        assert "₹23.60" in result.output
        stock = json.loads((data_dir / "products.json").read_text(encoding="utf-8"))[0]
        assert stock["quantity"] == 8

    def test_issue_with_taken_number_is_renumbered(self, run, data_dir):
        pid = self._stock_soap(run, data_dir)
        run("invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:1")

        result = run(
            "invoice", "issue", "--number", "INV-001", "--customer", "Ravi", "--items", f"{pid}:1"
        )

        assert result.exit_code == 0, result.output
        assert "was taken" in result.output
        assert len(_invoice_ids(data_dir)) == 2

    def test_padded_number_is_not_reported_as_taken(self, run, data_dir):
        pid = self._stock_soap(run, data_dir)

        result = run(
            "invoice", "issue", "--number", " INV-001 ", "--customer", "Asha", "--items", f"{pid}:1"
        )

        assert result.exit_code == 0, result.output
        assert "was taken" not in result.output
        assert "Invoice INV-001 " in result.output

    def test_issue_unknown_product(self, run):
        result = run(
            "invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", "nope:1"
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_issue_bad_items_format(self, run):
        result = run(
            "invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", "abc"
        )
        assert result.exit_code == 2
        assert "ProductId:Quantity" in result.output

    def test_show_missing(self, run):
        result = run("invoice", "show", "--id", "nope")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_and_search(self, run, data_dir):
        pid = self._stock_soap(run, data_dir)
        run("invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:1")

        assert "INV-001" in run("invoice", "list").output
        assert "INV-001" in run("invoice", "search", "asha").output
        assert "No invoices found." in run("invoice", "search", "ravi").output

    def test_pdf(self, run, data_dir, tmp_path):
        pid = self._stock_soap(run, data_dir)
        run("invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:1")
        invoice_id = _invoice_ids(data_dir)[0]

        result = run("invoice", "pdf", "--id", invoice_id)

        assert result.exit_code == 0, result.output
        assert (tmp_path / "pdf" / "INV-001.pdf").read_bytes().startswith(b"%PDF")

    def test_send(self, run, data_dir, tmp_path, monkeypatch):
        gateway = FakeMessagingGateway()
        monkeypatch.setattr(invoice_commands, "messaging_gateway", lambda config: gateway)
        pid = self._stock_soap(run, data_dir)
        run("invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:1")
        invoice_id = _invoice_ids(data_dir)[0]

        result = run("invoice", "send", "--id", invoice_id, "--phone", "919800000000")

        assert result.exit_code == 0, result.output
        assert "sent to 919800000000@c.us" in result.output
        assert len(gateway.texts) == 1
        assert gateway.documents[0][1] == tmp_path / "pdf" / "INV-001.pdf"
        assert gateway.closed is True

    def test_send_failure_is_reported(self, run, data_dir, monkeypatch):
        gateway = FakeMessagingGateway(fail_text=True)
        monkeypatch.setattr(invoice_commands, "messaging_gateway", lambda config: gateway)
        pid = self._stock_soap(run, data_dir)
        run("invoice", "issue", "--number", "INV-001", "--customer", "Asha", "--items", f"{pid}:1")

        result = run("invoice", "send", "--id", _invoice_ids(data_dir)[0], "--phone", "9198")

        assert result.exit_code == 1
        assert "text stage" in result.output
        assert gateway.closed is True
