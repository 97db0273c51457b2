"""Integer arithmetic utilities for Rupiah amounts.

All amounts and balances are int Rupiah (the smallest unit used). No float,
no Decimal.
"""


def rupiah_to_display(amount: int) -> str:
    """Format with Indonesian thousands separators: 55000 -> 'Rp 55.000'."""
    if amount < 0:
        return f"-Rp {-amount:,}".replace(",", ".")
    return f"Rp {amount:,}".replace(",", ".")


def total_debit(original_amount: int, admin_fee: int) -> int:
    """Amount leaving the owner's balance for a fee-bearing debit."""
    return original_amount + admin_fee
