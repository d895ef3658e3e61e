import random
import textwrap

import pytest

from statement_ingest import (
    FORMAT_OFX,
    FORMAT_TEXT,
    EmptyStatementError,
    MissingFileError,
    ParsedTransaction,
    ParserLimits,
    StatementParser,
    StatementTooLargeError,
    parse_statement,
)


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_csv_with_header_round_trip() -> None:
    rng = random.Random(7)
    expected = []
    for i in range(40):
        day = 1 + (i % 28)
        month = 1 + (i % 12)
        cents = rng.randint(-500_000, 500_000)
        expected.append(
            ParsedTransaction(
                date=f"2024-{month:02d}-{day:02d}",
                description=f"Merchant {i}",
                amount=cents / 100,
            )
        )
    rows = list(expected)
    rng.shuffle(rows)
    csv_text = "Date,Description,Amount\n" + "\n".join(
        f"{t.date},{t.description},{t.amount:.2f}" for t in rows
    )

    result = parse_statement("statement.csv", csv_text)

    assert result.format == FORMAT_TEXT
    assert result.count == len(expected)
    got = [(t.date, t.description, round(t.amount, 2)) for t in result.transactions]
    assert sorted(got) == sorted((t.date, t.description, t.amount) for t in expected)
    assert [t.date for t in result.transactions] == sorted(t.date for t in expected)


def test_duplicate_rows_collapse() -> None:
    csv_text = _dedent(
        """
        Date,Description,Amount
        2024-01-01,Rent,500.00
        2024-01-01,Rent,500.00
        """
    )
    result = parse_statement("rent.csv", csv_text)
    assert result.to_dict() == {
        "transactions": [{"date": "2024-01-01", "description": "Rent", "amount": 500.0}],
        "count": 1,
        "format": "CSV/Text",
    }


def test_ofx_fragment() -> None:
    content = _dedent(
        """
        <STMTTRN>
        <DTPOSTED>20240115120000</DTPOSTED>
        <TRNAMT>-75.20</TRNAMT>
        <MEMO>Grocery Store</MEMO>
        </STMTTRN>
        """
    ).encode("utf-8")
    result = parse_statement("Download.QFX", content)
    assert result.to_dict() == {
        "transactions": [{"date": "2024-01-15", "description": "Grocery Store", "amount": -75.2}],
        "count": 1,
        "format": FORMAT_OFX,
    }


def test_ofx_extension_wins_over_content() -> None:
    result = parse_statement("statement.ofx", "Date,Description,Amount\n2024-01-05,Coffee,-4.50")
    assert result.format == FORMAT_OFX
    assert result.count == 0


@pytest.mark.parametrize("content", [b"", "", "   \n\t\n\r\n", b"\xef\xbb\xbf\n"])
def test_empty_file_raises(content: bytes | str) -> None:
    with pytest.raises(EmptyStatementError, match="File is empty"):
        parse_statement("statement.csv", content)


def test_empty_ofx_raises() -> None:
    with pytest.raises(EmptyStatementError):
        parse_statement("statement.ofx", b"  \n")


def test_missing_content_raises() -> None:
    with pytest.raises(MissingFileError, match="No file provided"):
        parse_statement("statement.csv", None)


def test_unmatched_line_is_dropped_not_raised() -> None:
    result = parse_statement("notes.txt", "--- end of statement ---\n")
    assert result.count == 0
    assert result.transactions == ()


def test_plain_text_statement() -> None:
    content = _dedent(
        """
        ACME BANK STATEMENT
        Account 12345678

        Jan 15, 2024 Grocery Store $75.20
        05 Jan 2024 Coffee Shop 4.50
        --- end of statement ---
        """
    )
    result = parse_statement("statement.txt", content)
    assert list(result.transactions) == [
        ParsedTransaction(date="2024-01-05", description="Coffee Shop", amount=4.5),
        ParsedTransaction(date="2024-01-15", description="Grocery Store", amount=75.2),
    ]


def test_tab_separated_with_header_and_crlf() -> None:
    content = "Posted Date\tPayee\tAmount\r\n13/02/2024\tBakery\t(3.20)\r\n02/05/2024\tPay\t100\r\n"
    result = parse_statement("export.tsv", content.encode("utf-8"))
    assert list(result.transactions) == [
        ParsedTransaction(date="2024-02-05", description="Pay", amount=100.0),
        ParsedTransaction(date="2024-02-13", description="Bakery", amount=-3.2),
    ]


def test_header_without_date_or_amount_falls_back_to_scanning() -> None:
    content = _dedent(
        """
        Memo,Notes
        2024-01-05 Coffee,4.50
        """
    )
    result = parse_statement("odd.csv", content)
    assert list(result.transactions) == [
        ParsedTransaction(date="2024-01-05", description="Coffee", amount=4.5)
    ]


def test_headerless_csv_uses_token_extraction() -> None:
    content = _dedent(
        """
        2024-01-06,Tea,-3.00
        2024-01-05,Coffee,-4.50
        """
    )
    result = parse_statement("noheader.csv", content)
    assert [t.description for t in result.transactions] == ["Coffee", "Tea"]


def test_bom_prefixed_bytes() -> None:
    content = b"\xef\xbb\xbfDate,Description,Amount\n2024-01-05,Caf\xc3\xa9,-4.50\n"
    result = parse_statement("bom.csv", content)
    assert list(result.transactions) == [
        ParsedTransaction(date="2024-01-05", description="Café", amount=-4.5)
    ]


def test_type_column_does_not_change_amounts() -> None:
    content = _dedent(
        """
        Date,Description,Amount,Type
        2024-01-05,Coffee,4.50,DR
        2024-01-06,Refund,4.50,CREDIT
        """
    )
    result = parse_statement("typed.csv", content)
    assert [t.amount for t in result.transactions] == [4.5, 4.5]


def test_max_bytes_limit() -> None:
    with pytest.raises(StatementTooLargeError):
        parse_statement("big.csv", "Date,Description,Amount\n", limits=ParserLimits(max_bytes=8))


def test_max_lines_limit() -> None:
    content = "Date,Description,Amount\n2024-01-05,A,1\n2024-01-06,B,2\n2024-01-07,C,3\n"
    result = parse_statement("capped.csv", content, limits=ParserLimits(max_lines=2))
    assert [t.description for t in result.transactions] == ["A"]


def test_limits_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATEMENT_INGEST_MAX_BYTES", "8")
    with pytest.raises(StatementTooLargeError):
        StatementParser().parse("big.csv", "Date,Description,Amount\n")


def test_invalid_env_limits_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATEMENT_INGEST_MAX_BYTES", "lots")
    monkeypatch.setenv("STATEMENT_INGEST_MAX_LINES", "-3")
    assert ParserLimits.from_env() == ParserLimits()
