"""Example usage of the logger.

```
import lineq
from lineq.debug.logger import Logger
from lineq.simplifier import Simplifier

logger = Logger()
Simplifier.logger = logger

# simplify some equations as normal...
lineq.simplify_expression("2x + 5y = -12 + 3x -9(y - 5)")

logger.dump()   # dumps information into simplify_log.txt
logger.plot()   # creates a bar chart of times spent to simplify_log.png

```

Setting a class attribute means every Simplifier logs, including the ones simplify_expression makes for you.
Set it back to None when you're done.
"""

from typing import Dict, NamedTuple, Union

from ..canonical import LinearForm
from ..errors import SimplifyError


class Datum(NamedTuple):
    text: str
    time_spent: float
    outcome: Union[LinearForm, SimplifyError]
    passes: int

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, LinearForm)


class Logger:
    """Keeps track of time spent on each equation & how it turned out."""

    _data: Dict[str, Datum] = None

    def __init__(self):
        self._data = {}

    def log(self, text: str, time_spent: float, outcome: Union[LinearForm, SimplifyError], passes: int):
        """Log a simplify_expression call.

        text: the equation
        time_spent: seconds taken
        outcome: the linear form, or the error raised
        passes: simplification passes it took (0 if it failed before simplifying)
        """
        self._data[text] = Datum(text, time_spent, outcome, passes)

    @property
    def data(self) -> Dict[str, Datum]:
        return self._data

    @property
    def failures(self) -> Dict[str, Datum]:
        return {k: v for k, v in self._data.items() if not v.succeeded}

    def sort(self):
        """sorts the data by time spent on each equation, from most time to least time."""
        self._data = dict(sorted(self._data.items(), key=lambda x: x[1].time_spent, reverse=True))

    def dump(self, path: str = "simplify_log.txt"):
        self.sort()

        with open(path, "w") as f:
            f.write("Equation: time taken (s), passes, outcome")
            f.write("\n\n")
            for k, v in self._data.items():
                f.write(f"{k}: {v.time_spent}, {v.passes}, {v.outcome}\n")

    def plot(self, path: str = "simplify_log.png"):
        import matplotlib.pyplot as plt

        self.sort()
        x = list(self._data.keys())
        y = [v.time_spent for v in self._data.values()]
        plt.bar(x, y)
        plt.ylabel("Time taken to simplify (s)")
        plt.xticks(rotation=90)  # rotate labels vertically
        plt.tight_layout()  # automatically adjust spacing (needed to show the entirety of the vertical labels)
        plt.savefig(path)
