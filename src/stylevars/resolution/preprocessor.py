"""LESS/SCSS variable resolution with one level of unit-aware arithmetic."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from stylevars.index.models import DEFAULT_CONTEXT, VariableEntry
from stylevars.index.store import PREPROCESSOR_INDEX, IndexStore
from stylevars.resolution.cache import ResolutionCache
from stylevars.resolution.cancellation import NEVER_CANCELLED, CancellationToken
from stylevars.resolution.models import ResolutionInfo
from stylevars.resolution.scope import Scope

_ARITHMETIC_RE = re.compile(
    r"^\(\s*([@$][\w-]+)\s*(\*\*|\*|/|\+|-|%|min|max|floor|ceil|round)\s*([^)]*)\)$"
)
_REFERENCE_RE = re.compile(r"^\s*([@$][\w-]+)\s*$")
_QUANTITY_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([A-Za-z%]*)\s*$")

_UNARY_OPERATORS: dict[str, Callable[[float], float]] = {
    "floor": math.floor,
    "ceil": math.ceil,
    "round": lambda value: math.floor(value + 0.5),
}
_BINARY_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "*": lambda left, right: left * right,
    "/": lambda left, right: left / right,
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "%": math.fmod,
    "**": lambda left, right: left**right,
    "min": min,
    "max": max,
}


@dataclass(slots=True, frozen=True)
class Quantity:
    """A number with the unit suffix it was written with."""

    magnitude: float
    unit: str


@dataclass(slots=True, frozen=True)
class _Outcome:
    value: str
    steps: tuple[str, ...]
    complete: bool


def parse_quantity(text: str) -> Quantity | None:
    """Split ``8.5px`` into magnitude and unit; None when not a finite number."""
    match = _QUANTITY_RE.match(text)
    if match is None:
        return None
    magnitude = float(match.group(1))
    if not math.isfinite(magnitude):
        return None
    return Quantity(magnitude=magnitude, unit=match.group(2))


def format_number(value: float) -> str:
    """Integral values render without a decimal point, others with at most three decimals."""
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def swap_sigil(name: str) -> str:
    """``@name`` <-> ``$name``."""
    if name.startswith("@"):
        return f"${name[1:]}"
    if name.startswith("$"):
        return f"@{name[1:]}"
    return name


class PreprocessorResolver:
    """Resolves ``@name``/``$name`` variables against the index store."""

    def __init__(self, store: IndexStore, cache: ResolutionCache) -> None:
        self._store = store
        self._cache = cache

    def resolve_variable(
        self,
        name: str,
        scope: Scope,
        visited: frozenset[str] = frozenset(),
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> str | None:
        """Return the literal value of ``name``, or None when undefined or unresolvable."""
        info = self.resolve_with_steps(name, scope, visited, cancellation)
        return info.resolved if info is not None else None

    def resolve_with_steps(
        self,
        name: str,
        scope: Scope,
        visited: frozenset[str] = frozenset(),
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> ResolutionInfo | None:
        """Resolve ``name``; ``steps`` lists every preprocessor variable entered."""
        outcome = self._resolve(name, scope, visited, cancellation)
        if outcome is None:
            return None
        return ResolutionInfo(original=name, resolved=outcome.value, steps=outcome.steps)

    def evaluate_expression(
        self,
        raw: str,
        scope: Scope,
        visited: frozenset[str] = frozenset(),
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> ResolutionInfo | None:
        """Evaluate an arithmetic form such as ``(@base * 2)``.

        Returns None when ``raw`` is not an arithmetic form or cannot be computed.
        """
        arithmetic = _ARITHMETIC_RE.match(raw.strip())
        if arithmetic is None:
            return None
        base_name, operator, rhs = arithmetic.groups()
        outcome = self._evaluate_arithmetic(
            base_name, operator, rhs.strip(), scope, visited, cancellation
        )
        if outcome is None:
            return None
        return ResolutionInfo(original=raw, resolved=outcome.value, steps=outcome.steps)

    def lookup(self, name: str, scope: Scope) -> list[VariableEntry]:
        """Declarations for ``name`` under either sigil, default contexts first."""
        entries = self._store.entries(PREPROCESSOR_INDEX, name, scope.files)
        alternate = swap_sigil(name)
        if alternate != name:
            entries.extend(self._store.entries(PREPROCESSOR_INDEX, alternate, scope.files))
        defaults = [entry for entry in entries if entry.context == DEFAULT_CONTEXT]
        others = [entry for entry in entries if entry.context != DEFAULT_CONTEXT]
        return defaults + others

    def _resolve(
        self,
        name: str,
        scope: Scope,
        visited: frozenset[str],
        cancellation: CancellationToken,
    ) -> _Outcome | None:
        cancellation.check()
        if name in visited:
            return None
        cached = self._cache.get_preprocessor(scope, name)
        if cached is not None:
            return _Outcome(value=cached.resolved, steps=cached.steps, complete=True)

        inner_visited = visited | {name}
        for entry in self.lookup(name, scope):
            cancellation.check()
            evaluated = self._evaluate(entry.raw_value, scope, inner_visited, cancellation)
            if evaluated is None:
                continue
            outcome = _Outcome(
                value=evaluated.value,
                steps=(name, *evaluated.steps),
                complete=evaluated.complete,
            )
            if outcome.complete:
                self._cache.put_preprocessor(
                    scope,
                    name,
                    ResolutionInfo(original=name, resolved=outcome.value, steps=outcome.steps),
                )
            return outcome
        return None

    def _evaluate(
        self,
        raw: str,
        scope: Scope,
        visited: frozenset[str],
        cancellation: CancellationToken,
    ) -> _Outcome | None:
        arithmetic = _ARITHMETIC_RE.match(raw.strip())
        if arithmetic is not None:
            base_name, operator, rhs = arithmetic.groups()
            return self._evaluate_arithmetic(
                base_name, operator, rhs.strip(), scope, visited, cancellation
            )
        reference = _REFERENCE_RE.match(raw)
        if reference is not None:
            target = self._resolve(reference.group(1), scope, visited, cancellation)
            if target is None:
                return _Outcome(value=raw, steps=(), complete=False)
            return target
        return _Outcome(value=raw, steps=(), complete=True)

    def _evaluate_arithmetic(
        self,
        base_name: str,
        operator: str,
        rhs: str,
        scope: Scope,
        visited: frozenset[str],
        cancellation: CancellationToken,
    ) -> _Outcome | None:
        base = self._resolve(base_name, scope, visited, cancellation)
        if base is None:
            return None
        left = parse_quantity(base.value)
        if left is None:
            return None
        steps = base.steps
        complete = base.complete

        unary = _UNARY_OPERATORS.get(operator)
        if unary is not None:
            if rhs:
                return None
            result = float(unary(left.magnitude))
            return _Outcome(
                value=f"{format_number(result)}{left.unit}", steps=steps, complete=complete
            )

        if not rhs:
            return None
        rhs_text = rhs
        reference = _REFERENCE_RE.match(rhs)
        if reference is not None:
            operand = self._resolve(reference.group(1), scope, visited, cancellation)
            if operand is None:
                return None
            rhs_text = operand.value
            steps = (*steps, *operand.steps)
            complete = complete and operand.complete
        right = parse_quantity(rhs_text)
        if right is None:
            return None
        if operator in ("/", "%") and right.magnitude == 0:
            return None
        try:
            result = float(_BINARY_OPERATORS[operator](left.magnitude, right.magnitude))
        except (OverflowError, TypeError, ValueError):
            return None
        if not math.isfinite(result):
            return None
        unit = left.unit or right.unit
        return _Outcome(value=f"{format_number(result)}{unit}", steps=steps, complete=complete)
