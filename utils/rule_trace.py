# rule_trace.py

from typing import Dict, List, Optional

from fis.rule_engine import RuleFiring


def format_rule_trace(firings: List[RuleFiring]) -> List[str]:
    """
    Renders the per-rule evaluation trace returned by the rule engine.

    Each rule produces a header line followed by one line per antecedent
    term, showing the term's degree and the accumulator after folding it in.

    Args:
        firings: RuleFiring records from InferenceResult.firings.

    Returns:
        A list of text lines, without trailing newlines.
    """
    lines = []
    for firing in firings:
        lines.append(f"R{firing.index}: {firing.rule.text}")
        for step in firing.steps:
            op = step.operator or "IF"
            if step.skipped:
                lines.append(f"    {op:<3} {step.name:<20} (unknown, skipped)")
                continue
            lines.append(
                f"    {op:<3} {step.name:<20} mu={step.degree:.3f}  acc={step.accumulator:.3f}"
            )
        if firing.contributed:
            lines.append(f"    THEN {firing.consequent} <- {firing.degree:.3f}")
        else:
            lines.append(f"    THEN {firing.consequent} <- (no contribution)")
    return lines


def plot_rule_contributions(
    firings: List[RuleFiring],
    crisp_values: Dict[str, float],
    save_path: Optional[str] = None,
) -> None:
    """
    Bar chart of each rule's firing degree, coloured by consequent.

    Args:
        firings: RuleFiring records from InferenceResult.firings.
        crisp_values: Channel -> crisp input, shown in the corner box.
        save_path: Save the figure here instead of showing it.
    """
    import matplotlib.pyplot as plt
    import matplotlib.patches as mpatches

    contributing = [f for f in firings if f.contributed]
    labels = [f"R{f.index}" for f in contributing]
    ws = [f.degree for f in contributing]

    consequents = list(dict.fromkeys(f.consequent for f in contributing))
    cmap = plt.get_cmap("tab10")
    color_of = {name: cmap(i % 10) for i, name in enumerate(consequents)}
    colors = [color_of[f.consequent] for f in contributing]

    fig, ax1 = plt.subplots(figsize=(12, 6))
    bars = ax1.bar(range(len(labels)), ws, color=colors, alpha=0.7)

    ax1.set_ylabel("Firing Degree")
    ax1.set_ylim(0.0, 1.1)
    ax1.set_xticks(range(len(labels)))
    ax1.set_xticklabels(labels, rotation=45, ha="right")
    ax1.text(
        0.01,
        0.99,
        "\n".join(f"{k} = {v:.3f}" for k, v in crisp_values.items()),
        transform=ax1.transAxes,
        fontsize=11,
        verticalalignment="top",
        bbox=dict(facecolor="white", alpha=0.7, edgecolor="gray"),
    )

    # Annotate W values on top of bars
    for bar in bars:
        height = bar.get_height()
        if height > 0:
            ax1.text(
                bar.get_x() + bar.get_width() / 2,
                height + 0.01,
                f"{height:.2f}",
                ha="center",
                va="bottom",
                fontsize=8,
                color="black",
            )

    handles = [mpatches.Patch(color=color_of[name], label=name) for name in consequents]
    if handles:
        ax1.legend(handles=handles, loc="upper right")

    plt.title("Rule Contributions: Firing Degree per Rule")
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path)
        plt.close(fig)
    else:
        plt.show()
