"""
Setup error handling.

Every calibration or binding problem is a ``ConfigurationError``. During
startup the controller collects them into a ``SetupErrors`` accumulator
instead of stopping at the first one, so the operator sees the whole list
on the diagnostic display in one go.
"""
from typing import Iterable, List


class ConfigurationError(Exception):
    """One or more problems with calibration data or host setup."""

    def __init__(self, *problems: str):
        self.problems: List[str] = [str(p) for p in problems]
        super().__init__("\n\n".join(self.problems))


class SetupErrors:
    """Accumulates setup problems; reported together as count + message."""

    def __init__(self):
        self._problems: List[str] = []

    def add(self, problem: str) -> None:
        self._problems.append(str(problem))

    def extend(self, problems: Iterable[str]) -> None:
        for p in problems:
            self.add(p)

    def absorb(self, exc: ConfigurationError) -> None:
        """Record every problem carried by *exc*."""
        self.extend(exc.problems)

    @property
    def problems(self) -> List[str]:
        return list(self._problems)

    @property
    def count(self) -> int:
        return len(self._problems)

    @property
    def message(self) -> str:
        return "".join(p + "\n\n" for p in self._problems)

    def __bool__(self) -> bool:
        return bool(self._problems)

    def report(self) -> str:
        """Text for the diagnostic display."""
        return "There are currently %d setup errors:\n\n%s" % (self.count, self.message)

    def raise_if_any(self) -> None:
        if self._problems:
            raise ConfigurationError(*self._problems)
