"""Currency display helpers.

Settlement amounts are floats in dollars; rounding happens only here, at display time.
"""


def format_usd(amount: float) -> str:
    """Format dollars for display: 1234.5 -> '$1,234.50', -12 -> '-$12.00'."""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_percent(value: float) -> str:
    """10.0 -> '10%', 12.5 -> '12.5%'."""
    return f"{value:g}%"
