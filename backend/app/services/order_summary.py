"""
Format wave recommendations as a markdown order sheet.

Used for the copy-to-clipboard button and as the script the host reads when
phoning a pizzeria. Pure formatting, no engine logic.
"""

from typing import Sequence

from ..models.recommendation import HalfAndHalfPizza, WaveRecommendation
from .wave_allocator import Pizza


def _topping_text(toppings) -> str:
    return ", ".join(t.name for t in toppings) if toppings else "cheese"


def format_pizza_line(pizza: Pizza) -> str:
    size = f'{pizza.size.diameter_inches}" {pizza.size.name}'
    if isinstance(pizza, HalfAndHalfPizza):
        line = (
            f"- {pizza.quantity}x {size} half & half: "
            f"{_topping_text(pizza.left_half.toppings)} / {_topping_text(pizza.right_half.toppings)}"
        )
    else:
        line = f"- {pizza.quantity}x {size} {pizza.label or 'Cheese'}"
    notes = list(pizza.dietary_restrictions)
    if pizza.is_for_non_respondents:
        notes.append("for guests who haven't RSVP'd")
    if notes:
        line += f" ({', '.join(notes)})"
    return line


def format_order_summary(waves: Sequence[WaveRecommendation]) -> str:
    if not waves or all(not w.pizzas and not w.beverages for w in waves):
        return "No pizzas to order yet."

    multi_wave = len(waves) > 1
    lines: list[str] = ["## Pizza Order\n"]

    for wave_rec in waves:
        if multi_wave:
            heading = wave_rec.wave.label or wave_rec.wave.id
            if wave_rec.wave.arrival_time is not None:
                heading += f" at {wave_rec.wave.arrival_time.strftime('%H:%M')}"
            lines.append(f"**{heading}** ({wave_rec.wave.guest_allocation} guests)")

        for pizza in wave_rec.pizzas:
            lines.append(format_pizza_line(pizza))
        if wave_rec.pizzas:
            lines.append(f"Total pizzas: {wave_rec.total_pizzas}")

        if wave_rec.beverages:
            lines.append("")
            lines.append("**Beverages**")
            for beverage in wave_rec.beverages:
                lines.append(f"- {beverage.quantity}x {beverage.label or beverage.beverage.name}")
            lines.append(f"Total beverages: {wave_rec.total_beverages}")
        lines.append("")

    if multi_wave:
        lines.append(f"**Grand total:** {sum(w.total_pizzas for w in waves)} pizzas")

    return "\n".join(lines).rstrip() + "\n"
