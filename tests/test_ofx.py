import textwrap

from statement_ingest import ParsedTransaction, parse_ofx
from statement_ingest.ofx import ofx_date, tag_value


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_closed_tags() -> None:
    content = _dedent(
        """
        <OFX><BANKMSGSRSV1><STMTTRNRS><STMTRS><BANKTRANLIST>
        <STMTTRN>
          <TRNTYPE>DEBIT</TRNTYPE>
          <DTPOSTED>20240115120000</DTPOSTED>
          <TRNAMT>-75.20</TRNAMT>
          <MEMO>Grocery Store</MEMO>
        </STMTTRN>
        </BANKTRANLIST></STMTRS></STMTTRNRS></BANKMSGSRSV1></OFX>
        """
    )
    assert parse_ofx(content) == [
        ParsedTransaction(date="2024-01-15", description="Grocery Store", amount=-75.2)
    ]


def test_sgml_unclosed_tags() -> None:
    content = _dedent(
        """
        OFXHEADER:100
        DATA:OFXSGML
        <OFX>
        <STMTTRN>
        <TRNTYPE>CREDIT
        <DTPOSTED>20240201[0:GMT]
        <TRNAMT>1500.00
        <NAME>ACME PAYROLL
        </STMTTRN>
        </OFX>
        """
    )
    assert parse_ofx(content) == [
        ParsedTransaction(date="2024-02-01", description="ACME PAYROLL", amount=1500.0)
    ]


def test_colon_separated_fields() -> None:
    content = _dedent(
        """
        <STMTTRN>
        DTPOSTED:20240115120000
        TRNAMT:-75.20
        MEMO:Grocery Store
        </STMTTRN>
        """
    )
    assert parse_ofx(content) == [
        ParsedTransaction(date="2024-01-15", description="Grocery Store", amount=-75.2)
    ]


def test_fallback_tags_and_description() -> None:
    content = _dedent(
        """
        <stmttrn><dtuser>20240301</dtuser><trnamt>10.00</trnamt><name>Cash</name></stmttrn>
        <STMTTRN><DTPOSTED>20240302</DTPOSTED><TRNAMT>-2.50</TRNAMT></STMTTRN>
        <STMTTRN><DTPOSTED>20240303</DTPOSTED><DTUSER>20240101</DTUSER>
        <TRNAMT>1</TRNAMT><MEMO>Memo wins</MEMO><NAME>Name</NAME></STMTTRN>
        """
    )
    assert parse_ofx(content) == [
        ParsedTransaction(date="2024-03-01", description="Cash", amount=10.0),
        ParsedTransaction(date="2024-03-02", description="Bank transaction", amount=-2.5),
        ParsedTransaction(date="2024-03-03", description="Memo wins", amount=1.0),
    ]


def test_blocks_missing_date_or_amount_are_dropped() -> None:
    content = _dedent(
        """
        <STMTTRN><TRNAMT>-1.00</TRNAMT><MEMO>No date</MEMO></STMTTRN>
        <STMTTRN><DTPOSTED>20240105</DTPOSTED><MEMO>No amount</MEMO></STMTTRN>
        <STMTTRN><DTPOSTED>20241345</DTPOSTED><TRNAMT>5</TRNAMT></STMTTRN>
        <STMTTRN><DTPOSTED>20240105</DTPOSTED><TRNAMT>abc</TRNAMT></STMTTRN>
        """
    )
    assert parse_ofx(content) == []


def test_entities_are_unescaped() -> None:
    block = "<MEMO>AT&amp;T BILL</MEMO>"
    assert tag_value(block, "MEMO") == "AT&T BILL"


def test_ofx_date() -> None:
    assert ofx_date("20240115120000.000[-5:EST]") == "2024-01-15"
    assert ofx_date("2024") is None
    assert ofx_date("2024011X") is None


def test_no_blocks() -> None:
    assert parse_ofx("<OFX></OFX>") == []
