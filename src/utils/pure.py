from typing import List, Literal, Optional, Sequence

from market.models import CartItem, Product, Receipt


def _cell(value) -> str:
    # a raw pipe would split the markdown cell
    return str(value).replace("|", "\\|")


def money(value: float) -> str:
    return f"${value:.2f}"


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: Column headers, or None to use the first row as headers.
        rows: Table rows; cells are converted with str().
        aligns: 'l', 'c' or 'r' per column, centred when omitted.

    Returns:
        str: Markdown table, or "" when there are no rows.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = [_cell(h) for h in headers]
    rows = [[_cell(c) for c in row] for row in rows]

    if aligns is None:
        aligns = ["c"] * len(headers)
    elif len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    rule = {"l": ":---", "c": ":---:", "r": "---:"}
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join(rule[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join(lines)


def product_rows(products: Sequence[Product]) -> List[List[str]]:
    return [
        [
            p.id,
            p.name,
            p.category,
            money(p.price),
            p.quantity,
            f"{p.average_rating:.2f}",
        ]
        for p in products
    ]


def cart_markdown(items: Sequence[CartItem], title: str, total: float) -> str:
    if not items:
        return f"### {title}\n\nYour cart is empty."
    rows = [
        [i.product.name, money(i.product.price), i.buy_qty, money(i.line_total)]
        for i in items
    ]
    table = generate_markdown_table(
        ["Product", "Unit Price", "Qty", "Line Total"], rows, ["l", "r", "c", "r"]
    )
    return f"### {title}\n\n{table}\n\n**Total Estimate:** {money(total)}"


def receipt_markdown(receipt: Receipt) -> str:
    md = (
        "### Official Receipt\n\n"
        f"Date: {receipt.timestamp:%Y-%m-%d %H:%M:%S}\n\n"
    )
    if receipt.lines:
        rows = [
            [line.product_name, line.qty, money(line.line_total), f"{line.rating}/5"]
            for line in receipt.lines
        ]
        md += generate_markdown_table(
            ["Product", "Qty", "Line Total", "Your Rating"], rows, ["l", "c", "r", "c"]
        )
        md += "\n\n"
    if receipt.failures:
        md += "#### Not processed\n\n"
        md += "\n".join(
            f"- {f.product_name} x {f.qty}: {f.reason}" for f in receipt.failures
        )
        md += "\n\n"
    md += f"**TOTAL PAID:** {money(receipt.total)}\n\nThank you for your purchase!"
    return md
