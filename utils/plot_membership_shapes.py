import os
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from fis.fuzzy_set import FuzzySet, MFKind


def _x_range(sets: Sequence[FuzzySet], margin: float = 0.1) -> Tuple[float, float]:
    """Span covering every valid set's parameters, padded by ``margin``."""
    lows, highs = [], []
    for fset in sets:
        if not fset.is_valid:
            continue
        if fset.kind is MFKind.GAUSSIAN:
            center, width = fset.params
            spread = 4.0 * np.sqrt(width)
            lows.append(center - spread)
            highs.append(center + spread)
        else:
            lows.append(min(fset.params))
            highs.append(max(fset.params))
    if not lows:
        return 0.0, 1.0
    lo, hi = min(lows), max(highs)
    pad = (hi - lo) * margin or 1.0
    return lo - pad, hi + pad


def sample_membership(fset: FuzzySet, xs: np.ndarray) -> np.ndarray:
    return np.array([fset.evaluate(float(x)) for x in xs])


def plot_membership_functions(
    sets: Sequence[FuzzySet],
    title: str,
    points: Optional[List[Tuple[float, float]]] = None,
    save: bool = False,
    output_dir: str = "plots",
    n: int = 501,
) -> Optional[str]:
    """
    Plot the membership functions of a group of fuzzy sets.
    Optionally overlay points as red dots.
    Args:
        sets: Fuzzy sets to draw; invalid sets are skipped.
        title (str): Title of the plot
        points (list of (x, y)): Points to overlay, e.g. (crisp input, degree)
        save (bool): Save the plot as a PNG instead of showing it
        output_dir (str): Directory to save the plot
        n (int): Number of samples along the x axis
    Returns:
        The saved file name, or None when the plot was shown.
    """
    import matplotlib.pyplot as plt

    xs = np.linspace(*_x_range(sets), n)
    fig = plt.figure(figsize=(8, 4))
    for fset in sets:
        if not fset.is_valid:
            print(f"Warning: Invalid parameters for {fset.name}: {list(fset.params)}")
            continue
        ys = sample_membership(fset, xs)
        plt.plot(xs, ys, label=f"{fset.name} ({fset.mf_label})")
        plt.fill_between(xs, ys, alpha=0.1)

    # Overlay points if given
    if points:
        x, y = zip(*points)
        plt.scatter(
            x,
            y,
            color="red",
            s=30,
            marker="o",
            edgecolors="black",
            linewidths=0.8,
            label="Fuzzified inputs",
            zorder=10,
        )

    plt.title(f"Membership Functions – {title}")
    plt.xlabel("Crisp Value")
    plt.ylabel("Membership Degree")
    plt.ylim(-0.05, 1.05)
    plt.grid(True)
    plt.legend()
    plt.tight_layout()

    if save:
        os.makedirs(output_dir, exist_ok=True)
        filename = os.path.join(output_dir, f"{title.lower()}_membership_functions.png")
        fig.savefig(filename)
        plt.close(fig)
        return filename

    plt.show()
    return None


def plot_channels(
    sets_by_channel: Dict[str, Sequence[FuzzySet]],
    crisp_values: Dict[str, float],
    input_degrees: Dict[str, float],
    save: bool = False,
    output_dir: str = "plots",
) -> List[str]:
    """One plot per input channel with its fuzzified degrees overlaid."""
    saved = []
    for channel, sets in sets_by_channel.items():
        if not sets:
            continue
        x = crisp_values.get(channel)
        points = None
        if x is not None:
            points = [(x, input_degrees[s.name]) for s in sets if s.name in input_degrees]
        filename = plot_membership_functions(sets, channel, points, save=save, output_dir=output_dir)
        if filename:
            saved.append(filename)
    return saved
