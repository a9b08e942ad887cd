"""Transaction history classification for lending-pool activity.

Turns raw Etherscan transaction and token-transfer lists into the history
entries shown in the dashboard: each pool transaction is broken into
debit/credit transfers and labelled Supply, Withdraw, Borrow, Repay or
Unknown.

All amounts are Decimal; they are only converted to strings at the JSON
boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

Direction = Literal["debit", "credit"]

ERC20_TRANSFER_SELECTOR = "0xa9059cbb"
ERC20_TRANSFER_INPUT_LENGTH = 138


@dataclass(frozen=True)
class ChainConfig:
    """Static description of a supported chain."""

    chain_id: int
    name: str
    symbol: str
    decimals: int
    explorer: str


CHAIN_CONFIGS: dict[str, ChainConfig] = {
    "scrollSepolia": ChainConfig(
        chain_id=534351,
        name="Scroll Sepolia",
        symbol="ETH",
        decimals=18,
        explorer="https://sepolia.scrollscan.com",
    ),
}

DEFAULT_CHAIN = "scrollSepolia"

# AAVE V3 pool contracts (lowercase)
AAVE_V3_POOLS: frozenset[str] = frozenset({
    "0x48914c788295b5db23af2b5f0b3be775c4ea9440",
    "0x57ce905cfd7f986a929a26b006f797d181db706e",
})


@dataclass
class Transfer:
    """One asset movement inside a transaction, relative to the viewed wallet."""

    asset: str
    symbol: str
    amount: Decimal
    direction: Direction

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset": self.asset,
            "symbol": self.symbol,
            "amount": format_amount(self.amount),
            "direction": self.direction,
        }


def format_amount(amount: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros (e.g. '0.5', '10')."""
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def _scaled(raw: Any, decimals: int) -> Decimal:
    """Convert an integer base-unit string to a Decimal in whole units."""
    try:
        return Decimal(str(raw)) / (Decimal(10) ** int(decimals))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_erc20_transfer_input(tx_input: str | None) -> tuple[str, int] | None:
    """Decode ``transfer(address,uint256)`` calldata into (to, amount).

    Returns None for anything that is not a plain ERC-20 transfer call.
    """
    if (
        not tx_input
        or not tx_input.startswith(ERC20_TRANSFER_SELECTOR)
        or len(tx_input) != ERC20_TRANSFER_INPUT_LENGTH
    ):
        return None
    to = "0x" + tx_input[34:74]
    try:
        amount = int(tx_input[74:], 16)
    except ValueError:
        return None
    return to, amount


def _is_atoken(symbol: str) -> bool:
    return symbol.startswith("a") and len(symbol) > 3


def infer_tx_type_and_summary(transfers: list[Transfer]) -> tuple[str, str]:
    """Label a pool transaction from the shape of its transfers.

    - Supply: one non-aToken out, one aToken in
    - Withdraw: one aToken out, one non-aToken in
    - Borrow: nothing out, an aToken and a non-aToken in
    - Repay: an aToken and a non-aToken out
    Anything else is Unknown with a signed list of movements.
    """
    debits = [t for t in transfers if t.direction == "debit"]
    credits = [t for t in transfers if t.direction == "credit"]

    if len(debits) == 1 and len(credits) == 1:
        out, received = debits[0], credits[0]
        if not _is_atoken(out.symbol) and _is_atoken(received.symbol):
            return (
                "Supply",
                f"Supplied {format_amount(out.amount)} {out.symbol} "
                f"for {format_amount(received.amount)} {received.symbol}",
            )
        if _is_atoken(out.symbol) and not _is_atoken(received.symbol):
            return (
                "Withdraw",
                f"Withdrew {format_amount(received.amount)} {received.symbol} "
                f"by redeeming {format_amount(out.amount)} {out.symbol}",
            )

    if not debits and len(credits) == 2:
        atoken = next((c for c in credits if _is_atoken(c.symbol)), None)
        token = next((c for c in credits if not _is_atoken(c.symbol)), None)
        if atoken and token:
            return (
                "Borrow",
                f"Borrowed {format_amount(token.amount)} {token.symbol} "
                f"(collateral: {format_amount(atoken.amount)} {atoken.symbol})",
            )

    if len(debits) == 2:
        atoken = next((d for d in debits if _is_atoken(d.symbol)), None)
        token = next((d for d in debits if not _is_atoken(d.symbol)), None)
        if atoken and token:
            return (
                "Repay",
                f"Repaid {format_amount(token.amount)} {token.symbol} "
                f"(burned {format_amount(atoken.amount)} {atoken.symbol})",
            )

    summary = ", ".join(
        f"{'-' if t.direction == 'debit' else '+'}{format_amount(t.amount)} {t.symbol}"
        for t in transfers
    )
    return "Unknown", summary


def _direction(sender: str | None, address: str) -> Direction:
    return "debit" if (sender or "").lower() == address.lower() else "credit"


def _iso_timestamp(raw: Any) -> str:
    try:
        seconds = int(raw)
    except (TypeError, ValueError):
        seconds = 0
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def build_transfers(
    tx: dict,
    token_transfers: list[dict],
    address: str,
    chain: ChainConfig,
) -> list[Transfer]:
    """Collect native and token movements belonging to one transaction."""
    transfers: list[Transfer] = []

    native_amount = _scaled(tx.get("value", "0"), chain.decimals)
    if native_amount > 0:
        transfers.append(Transfer(
            asset=chain.symbol,
            symbol=chain.symbol,
            amount=native_amount,
            direction=_direction(tx.get("from"), address),
        ))

    for event in token_transfers:
        if event.get("hash") != tx.get("hash"):
            continue
        transfers.append(Transfer(
            asset=event.get("tokenName", ""),
            symbol=event.get("tokenSymbol", ""),
            amount=_scaled(event.get("value", "0"), event.get("tokenDecimal", 0)),
            direction=_direction(event.get("from"), address),
        ))

    return transfers


def build_history(
    address: str,
    chain: ChainConfig,
    transactions: list[dict],
    token_transfers: list[dict],
) -> dict[str, Any]:
    """Filter transactions to the lending pools and build the history payload."""
    entries: list[dict[str, Any]] = []
    total_amount = Decimal("0")

    for tx in transactions:
        if (tx.get("to") or "").lower() not in AAVE_V3_POOLS:
            continue

        transfers = build_transfers(tx, token_transfers, address, chain)
        tx_type, summary = infer_tx_type_and_summary(transfers)

        total_amount += sum(
            (
                t.amount
                for t in transfers
                if t.symbol == chain.symbol and t.direction == "debit"
            ),
            Decimal("0"),
        )

        entries.append({
            "id": tx.get("hash"),
            "protocolName": "AAVE",
            "transfers": [t.to_dict() for t in transfers],
            "txType": tx_type,
            "summary": summary,
            "timestamp": _iso_timestamp(tx.get("timeStamp")),
            "status": "completed" if tx.get("isError") == "0" else "failed",
            "chain": chain.name,
            "protocolLogo": "/aave-logo.png",
            "walletAddress": tx.get("from"),
        })

    return {
        "transactions": entries,
        "metadata": {
            "totalTransactions": len(entries),
            "totalSuccessful": sum(1 for e in entries if e["status"] == "completed"),
            "totalAmount": format_amount(total_amount),
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "chain": chain.name,
            "symbol": chain.symbol,
            "explorer": chain.explorer,
        },
    }
