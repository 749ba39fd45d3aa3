"""
Timing of the runner's stages.

CodeProfiler wraps a stage such as loading the knowledge files or one
fuzzify -> infer cycle and logs its duration to the 'profiler' logger. When
the stage processes a known number of items (definition lines, rules) the
per-item cost is logged as well.
"""
import time
import logging

profiler_log = logging.getLogger('profiler')


class CodeProfiler:
    """
    A context manager to time one stage of a run.

    Example:
        with CodeProfiler("Inference", items=len(rules), unit="rule"):
            run = controller.evaluate(crisp_values)

    Attributes:
        name (str): The stage being timed.
        items (int): Number of items the stage handles; 0 when unknown.
        unit (str): What one item is, for the log line.
        budget_ms (float): Warn when the stage takes longer than this.
        elapsed_ms (float): Measured time, available after the block exits.
    """
    def __init__(self, name="", items=0, unit="item", budget_ms=100.0):
        self.name = name
        self.items = items
        self.unit = unit
        self.budget_ms = budget_ms
        self.elapsed_ms = 0.0

    @property
    def per_item_ms(self):
        return self.elapsed_ms / self.items if self.items else None

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type is not None:
            profiler_log.info("'%s' aborted after %.3f ms (%s)", self.name, self.elapsed_ms,
                              exc_type.__name__)
            return
        if self.items:
            profiler_log.info("'%s' took %.3f ms for %d %ss (%.4f ms/%s)", self.name,
                              self.elapsed_ms, self.items, self.unit, self.per_item_ms, self.unit)
        else:
            profiler_log.info("'%s' took %.3f ms", self.name, self.elapsed_ms)
        if self.elapsed_ms > self.budget_ms:
            profiler_log.warning("'%s' exceeded its %.1f ms budget.", self.name, self.budget_ms)
