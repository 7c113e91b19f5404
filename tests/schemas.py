"""
Shared test schemas for all test files.

A small slice of the ISO 20022 common types (cash account, amounts, postal
address, statement entries) declared once so the tests agree on shapes and
tags.
"""

from enum import Enum

from isoschema import Alt
from isoschema.validation import (
    Choice,
    Code,
    Decimal,
    Flag,
    MinValue,
    Node,
    Optional,
    Pattern,
    Range,
    Repeated,
    Required,
    Text,
)

CURRENCY = r"[A-Z]{3,3}"
IBAN = r"[A-Z]{2,2}[0-9]{2,2}[a-zA-Z0-9]{1,30}"
COUNTRY = r"[A-Z]{2,2}"

VALID_IBAN = "DE89370400440532013000"


class AddressType2Code(Enum):
    ADDR = "ADDR"
    PBOX = "PBOX"
    HOME = "HOME"
    BIZZ = "BIZZ"
    MLTO = "MLTO"
    DLVY = "DLVY"


class CreditDebitCode(Enum):
    CRDT = "CRDT"
    DBIT = "DBIT"


# =============================================================================
# Amounts
# =============================================================================

ActiveCurrencyAndAmount = Node(
    "ActiveCurrencyAndAmount",
    {
        "ccy": Required(Text(Pattern(CURRENCY)), tag="@Ccy"),
        "value": Required(Decimal(MinValue(0)), tag="$value"),
    },
)

# =============================================================================
# Accounts
# =============================================================================

AccountSchemeName1Choice = Choice(
    {
        "cd": Optional(Text(Range(1, 4)), tag="Cd"),
        "prtry": Optional(Text(Range(1, 35)), tag="Prtry"),
    },
    name="AccountSchemeName1Choice",
)

GenericAccountIdentification1 = Node(
    "GenericAccountIdentification1",
    {
        "id": Required(Text(Range(1, 34)), tag="Id"),
        "schme_nm": Optional(AccountSchemeName1Choice, tag="SchmeNm"),
        "issr": Optional(Text(Range(1, 35)), tag="Issr"),
    },
)

AccountIdentification4Choice = Choice(
    {
        "iban": Optional(Text(Pattern(IBAN)), tag="IBAN"),
        "othr": Optional(GenericAccountIdentification1, tag="Othr"),
    },
    name="AccountIdentification4Choice",
)

CashAccount = Node(
    "CashAccount",
    {
        "id": Required(AccountIdentification4Choice, tag="Id"),
        "ccy": Optional(Text(Pattern(CURRENCY)), tag="Ccy"),
        "nm": Optional(Text(Range(1, 70)), tag="Nm"),
    },
)

# =============================================================================
# Addresses
# =============================================================================

PostalAddress = Node(
    "PostalAddress24",
    {
        "adr_tp": Optional(Code(AddressType2Code), tag="AdrTp"),
        "strt_nm": Optional(Text(Range(1, 70)), tag="StrtNm"),
        "twn_nm": Optional(Text(Range(1, 35)), tag="TwnNm"),
        "ctry": Optional(Text(Pattern(COUNTRY)), tag="Ctry"),
        "adr_line": Repeated(Text(Range(1, 70)), tag="AdrLine", optional=True),
    },
)

# =============================================================================
# Statements
# =============================================================================

ReportEntry = Node(
    "ReportEntry",
    {
        "amt": Required(ActiveCurrencyAndAmount, tag="Amt"),
        "cdt_dbt_ind": Required(Code(CreditDebitCode), tag="CdtDbtInd"),
        "rvsl_ind": Optional(Flag(), tag="RvslInd"),
    },
)

AccountStatement = Node(
    "AccountStatement",
    {
        "id": Required(Text(Range(1, 35)), tag="Id"),
        "acct": Required(CashAccount, tag="Acct"),
        "ntry": Repeated(ReportEntry, tag="Ntry", optional=True),
    },
)


def entry(ccy: str = "USD", value: float = 100.0, ind=CreditDebitCode.CRDT) -> dict:
    """Valid ReportEntry instance unless overridden."""
    return {"amt": {"ccy": ccy, "value": value}, "cdt_dbt_ind": ind}


def statement(*entries: dict) -> dict:
    """Valid AccountStatement instance with the given entries."""
    return {
        "id": "STMT-0001",
        "acct": {"id": Alt("iban", VALID_IBAN), "ccy": "EUR"},
        "ntry": list(entries),
    }
