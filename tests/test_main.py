import sys
import os
import io
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main
from models import AccountSnapshot


class TestFormatDecimal:
    @pytest.mark.parametrize("value, expected", [
        (Decimal("1.5"), "1.5000"),
        (Decimal("0"), "0.0000"),
        (Decimal("2.00001"), "2.0000"),
        (Decimal("1E+2"), "100.0000"),
        (Decimal("1000000000000000000000000"), "1000000000000000000000000.0000"),
        (Decimal("123456789012345678901234567890.12345"), "123456789012345678901234567890.1234"),
    ])
    def test_four_places(self, value, expected):
        assert main.format_decimal(value) == expected


class TestWriteAccounts:
    def test_sorted_by_client(self):
        stream = io.StringIO()
        main.write_accounts([
            AccountSnapshot(2, Decimal("2"), Decimal("0"), Decimal("2"), False),
            AccountSnapshot(1, Decimal("0"), Decimal("0"), Decimal("0"), True),
        ], stream)

        assert stream.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,0.0000,0.0000,0.0000,true",
            "2,2.0000,0.0000,2.0000,false",
        ]


class TestMain:
    def test_end_to_end(self, tmp_path, monkeypatch, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 1, 1.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
            "dispute, 1, 3,",
        ]))
        monkeypatch.setattr(sys, "argv", ["main.py", str(csv_file)])

        main.main()

        captured = capsys.readouterr()
        assert captured.out.splitlines() == [
            "client,available,held,total,locked",
            "1,1.5000,0.0000,1.5000,false",
            "2,2.0000,0.0000,2.0000,false",
        ]
        assert "Processed: 4, Failed: 2, Malformed: 0" in captured.err

    def test_large_balance_is_reported(self, tmp_path, monkeypatch, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1000000000000000000000000",
            "deposit, 2, 2, 1.5",
        ]))
        monkeypatch.setattr(sys, "argv", ["main.py", str(csv_file)])

        main.main()

        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,1000000000000000000000000.0000,0.0000,1000000000000000000000000.0000,false",
            "2,1.5000,0.0000,1.5000,false",
        ]

    def test_usage(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py"])

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", str(tmp_path / "missing.csv")])

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1
        assert capsys.readouterr().out == ""
