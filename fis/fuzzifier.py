"""
Fuzzifies crisp channel values into degrees of membership of the input sets.

Each input channel (e.g. 'service', 'food') carries one crisp value. An input
set belongs to the first channel whose match substrings occur in the set's
name, so 'Poor_Service' and 'Good_Service' are both driven by 'service'.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

from fis.diagnostics import DEFINITION, Diagnostic
from fis.fuzzy_set import InputFuzzySet

fuzzifier_log = logging.getLogger("fuzzifier")


class Fuzzifier:
    """
    Routes input fuzzy sets to channels and fuzzifies them.

    Attributes:
        routing (Dict[str, List[str]]): Channel name -> name substrings that
            select the input sets driven by that channel.
        sets_by_channel (Dict[str, List[InputFuzzySet]]): Routed input sets.
        diagnostics (List[Diagnostic]): One warning per unrouted input set.
    """

    def __init__(self, input_sets: Sequence[InputFuzzySet], routing: Dict[str, List[str]]) -> None:
        """
        Args:
            input_sets (Sequence[InputFuzzySet]): Input sets from the loader.
            routing (Dict[str, List[str]]): Channel routing from the config.
                An empty substring list matches on the channel name itself.
        """
        self.routing = {ch: list(subs) or [ch] for ch, subs in routing.items()}
        self.sets_by_channel: Dict[str, List[InputFuzzySet]] = {ch: [] for ch in self.routing}
        self.diagnostics: List[Diagnostic] = []

        for fset in input_sets:
            channel = self.route(fset.name)
            if channel is None:
                diag = Diagnostic(
                    DEFINITION,
                    f"input set '{fset.name}' matches no input channel and is never fuzzified",
                    fset.name,
                    fset.line,
                )
                fuzzifier_log.warning("%s", diag)
                self.diagnostics.append(diag)
                continue
            self.sets_by_channel[channel].append(fset)

        fuzzifier_log.info(
            "Fuzzifier initialized with %s.",
            ", ".join(f"{len(s)} {ch} sets" for ch, s in self.sets_by_channel.items()) or "no channels",
        )

    def route(self, set_name: str) -> Optional[str]:
        """Returns the channel driving ``set_name``, or None."""
        for channel, substrings in self.routing.items():
            if any(sub in set_name for sub in substrings):
                return channel
        return None

    def fuzzify(self, channel: str, crisp_value: float) -> Dict[str, float]:
        """
        Fuzzifies a single crisp channel value.

        Args:
            channel (str): The input channel name.
            crisp_value (float): The crisp value to fuzzify.

        Returns:
            Dict[str, float]: Set name -> membership degree, for every set
                routed to the channel (zero degrees included).

        Raises:
            KeyError: If the channel is unknown.
            ValueError: If the crisp value is NaN or infinite.
        """
        if channel not in self.sets_by_channel:
            raise KeyError(f"No input channel named '{channel}'")
        if not math.isfinite(crisp_value):
            raise ValueError(f"Crisp value for '{channel}' must be finite, got {crisp_value}")

        degrees = {fset.name: fset.fuzzify(crisp_value) for fset in self.sets_by_channel[channel]}
        formatted = {k: f"{v:.3f}" for k, v in degrees.items()}
        fuzzifier_log.debug("Fuzzified %s=  %.3f -> %s", channel, crisp_value, formatted)
        return degrees

    def fuzzify_all(self, crisp_values: Dict[str, float]) -> Dict[str, float]:
        """
        Fuzzifies every channel and merges the degrees into one mapping.

        Raises:
            KeyError: If a configured channel has no crisp value.
            ValueError: If a crisp value is NaN or infinite.
        """
        merged: Dict[str, float] = {}
        for channel in self.sets_by_channel:
            if channel not in crisp_values:
                raise KeyError(f"No crisp value supplied for input channel '{channel}'")
            merged.update(self.fuzzify(channel, float(crisp_values[channel])))
        return merged
