"""Tax on withdrawals from tax-deferred retirement assets."""


def gross_up_withdrawal(net_amount: float, tax_rate: float) -> float:
    """Gross withdrawal needed so that net_amount remains after tax.

    Withdrawals from a 401k-style account are taxed as ordinary income:
    gross = net / (1 - rate).
    """
    if net_amount <= 0:
        return 0.0
    return net_amount / (1 - tax_rate)


def tax_on_withdrawal(net_amount: float, tax_rate: float) -> float:
    """Tax paid on a grossed-up withdrawal that nets net_amount."""
    return gross_up_withdrawal(net_amount, tax_rate) - max(net_amount, 0.0)
