import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from nethermind.narrator.decoding import TransactionDecoder
from nethermind.narrator.exceptions import DecodingError
from nethermind.narrator.narrative import (
    NarrativeGenerator,
    NarrativeRequest,
    abbreviate,
    format_tx_hash,
    generate_sequential_narrative,
)
from nethermind.narrator.types import (
    DecodedCall,
    RawTransaction,
    TransactionReceipt,
    with_deployed_address,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("pipeline")


@dataclass
class TransactionDetail:
    """Per-transaction outcome of a narration run"""

    hash: str
    from_address: str
    to_address: str | None

    success: bool
    """ Receipt status.  False for failed and pending transactions """

    status: str
    """ One of ``success``, ``failed``, ``pending``.  ``success`` if no receipts were supplied """

    narrative: str = ""
    decoded: DecodedCall | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        detail: dict[str, Any] = {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to_address,
            "success": self.success,
            "status": self.status,
            "decoded": self.decoded is not None,
        }
        if self.decoded is not None:
            detail.update(
                function=self.decoded.function_name,
                contract_type=self.decoded.contract_type.value,
                parameters=dict(self.decoded.parameters),
            )
        if self.error is not None:
            detail["error"] = self.error
        return detail


@dataclass
class NarrativeReport:
    """Result of narrating a sequence of transactions"""

    narrative: str
    """ Sequential narrative, followed by a note on the number of transactions that failed to process """

    transactions: list[TransactionDetail] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)
    include_failed: bool = False

    @property
    def transactions_analyzed(self) -> int:
        return len(self.transactions) - len(self.errors)

    def to_dict(self) -> dict[str, Any]:
        report: dict[str, Any] = {
            "narrative": self.narrative,
            "transactions_analyzed": self.transactions_analyzed,
            "transactions_failed": len(self.errors),
            "transactions": [tx.to_dict() for tx in self.transactions],
            "include_failed": self.include_failed,
        }
        if self.errors:
            report["errors"] = self.errors
        return report


def _receipt_status(receipt: TransactionReceipt | None, has_receipts: bool) -> tuple[bool, str]:
    if not has_receipts:
        return True, "success"
    if receipt is None:
        return False, "pending"
    return (True, "success") if receipt.status else (False, "failed")


def undecoded_narrative(tx: RawTransaction) -> str:
    """Narrative for a transaction whose input could not be decoded"""
    sender = abbreviate(tx.from_address.lower())
    if tx.to_address is None:
        return f"{sender} deployed contract [tx: {format_tx_hash(tx.hash)}]"
    return f"{sender} called contract at {abbreviate(tx.to_address.lower())} [tx: {format_tx_hash(tx.hash)}]"


async def narrate_transactions(
    transactions: Sequence[RawTransaction],
    receipts: Sequence[TransactionReceipt | None] | None = None,
    generator: NarrativeGenerator | None = None,
    decoder: TransactionDecoder | None = None,
    include_failed: bool = False,
) -> NarrativeReport:
    """
    Decodes and narrates a sequence of transactions in order.

    Transactions that did not succeed are skipped unless ``include_failed`` is set.  A transaction whose input
    cannot be decoded is still narrated with a generic sentence, and is reported in the ``errors`` list.

    :param transactions: transactions in chronological order
    :param receipts: receipts matching ``transactions`` by index.  A None receipt marks a pending transaction.
        If no receipts are supplied, every transaction is treated as successful
    :param generator: narrative generator.  Defaults to a generator without labels or token metadata
    :param decoder: transaction decoder.  Defaults to a decoder over the default registry
    :param include_failed: narrate failed and pending transactions, marking them as failed
    """
    generator = generator or NarrativeGenerator()
    decoder = decoder or TransactionDecoder()

    if receipts is not None and len(receipts) != len(transactions):
        raise ValueError(f"Received {len(receipts)} receipts for {len(transactions)} transactions")

    details: list[TransactionDetail] = []
    requests: list[NarrativeRequest] = []
    request_details: list[TransactionDetail] = []
    errors: list[dict[str, str]] = []

    for index, tx in enumerate(transactions):
        receipt = receipts[index] if receipts is not None else None
        success, status = _receipt_status(receipt, receipts is not None)
        if not success and not include_failed:
            logger.debug(f"Skipping {status} transaction {tx.hash}")
            continue

        detail = TransactionDetail(
            hash=tx.hash,
            from_address=tx.from_address.lower(),
            to_address=tx.to_address.lower() if tx.to_address else None,
            success=success,
            status=status,
        )
        details.append(detail)

        try:
            decoded = decoder.decode_transaction(tx)
        except DecodingError as e:
            logger.warning(f"Could not decode transaction {tx.hash}: {e}")
            detail.narrative = undecoded_narrative(tx)
            detail.error = str(e)
            errors.append({"hash": tx.hash, "type": e.__class__.__name__, "message": str(e)})
            continue

        if receipt is not None:
            decoded = with_deployed_address(decoded, receipt.contract_address)
        detail.decoded = decoded

        requests.append(
            NarrativeRequest(
                decoded=decoded,
                from_address=tx.from_address,
                to_address=tx.to_address,
                tx_hash=tx.hash,
                success=success,
            )
        )
        request_details.append(detail)

    for detail, narrative in zip(request_details, await generator.generate_batch(requests)):
        detail.narrative = narrative

    full_narrative = generate_sequential_narrative([detail.narrative for detail in details])
    if errors:
        full_narrative += f"\n\nNote: {len(errors)} transaction(s) failed to process."

    return NarrativeReport(
        narrative=full_narrative,
        transactions=details,
        errors=errors,
        include_failed=include_failed,
    )
