"""Amount limits and admin fees per transaction type.

receive rows are never requested by a user, so they carry no rule.
"""

from dataclasses import dataclass

from src.wl_common.enums import TransactionType
from src.wl_common.errors import AmountOutOfRangeError

DEFAULT_ADMIN_FEE = 1200  # Rupiah, flat per transaction


@dataclass(frozen=True)
class TransactionRule:
    min_amount: int
    max_amount: int
    admin_fee: int = DEFAULT_ADMIN_FEE

    def check(self, txn_type: TransactionType, amount: int) -> None:
        if not (self.min_amount <= amount <= self.max_amount):
            raise AmountOutOfRangeError(
                txn_type.value, self.min_amount, self.max_amount, amount
            )


TRANSACTION_RULES: dict[TransactionType, TransactionRule] = {
    TransactionType.TOPUP: TransactionRule(min_amount=12_000, max_amount=10_000_000),
    TransactionType.WITHDRAW: TransactionRule(min_amount=55_000, max_amount=10_000_000),
    TransactionType.SEND: TransactionRule(min_amount=10_000, max_amount=10_000_000),
}


def rule_for(txn_type: TransactionType) -> TransactionRule:
    return TRANSACTION_RULES[txn_type]
