"""Counterexample search — discovers gaps in implementation or tests.

This module runs independently of the test suite.  Over a grid of
edge-case values (see ``contract.edge_values``) it systematically
searches for:

1. Postcondition violations: inputs where BigInt disagrees with the
   native ``int`` oracle or leaves a non-canonical result.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field
from typing import Sequence

from bigint import BigInt
from contract import BigIntContract, build_contract

# Ternary properties grow cubically; they only walk a prefix of the grid.
TERNARY_GRID_SIZE = 8


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found; all checks passed.")
        return "\n".join(lines)


def _show(value: object) -> str:
    return value.to_hex() if isinstance(value, BigInt) else repr(value)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    contract: BigIntContract,
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every input pair on the grid."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op in contract.operations.items():
        for a in contract.values:
            for b in contract.second_inputs(op):
                inputs = (_show(a), _show(b))
                # Skip inputs that are supposed to error
                if any(ec.trigger(a, b) for ec in op.error_conditions):
                    checks += 1
                    continue

                try:
                    result = op.invoke(a, b)
                except Exception as e:
                    cxs.append(Counterexample(
                        category="unexpected_error",
                        operation=op_name,
                        inputs=inputs,
                        expected="no error",
                        actual=f"{type(e).__name__}: {e}",
                        description="Operation raised an unexpected exception",
                    ))
                    checks += 1
                    continue

                for post in op.postconditions:
                    if not post.check(a, b, result):
                        cxs.append(Counterexample(
                            category="postcondition_violation",
                            operation=op_name,
                            inputs=inputs,
                            expected=post.description,
                            actual=f"result={_show(result)}",
                            description=f"Postcondition '{post.name}' violated",
                        ))
                checks += 1

    return cxs, checks


def search_error_condition_violations(
    contract: BigIntContract,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op in contract.operations.items():
        for a in contract.values:
            for b in contract.second_inputs(op):
                for ec in op.error_conditions:
                    if not ec.trigger(a, b):
                        continue
                    checks += 1
                    try:
                        result = op.invoke(a, b)
                        cxs.append(Counterexample(
                            category="missing_error",
                            operation=op_name,
                            inputs=(_show(a), _show(b)),
                            expected=f"{ec.exception.__name__}",
                            actual=f"result={_show(result)}",
                            description=(
                                f"Error condition '{ec.name}' should have "
                                f"triggered but didn't"
                            ),
                        ))
                    except ec.exception:
                        pass  # expected
                    except Exception as e:
                        cxs.append(Counterexample(
                            category="wrong_error",
                            operation=op_name,
                            inputs=(_show(a), _show(b)),
                            expected=f"{ec.exception.__name__}",
                            actual=f"{type(e).__name__}: {e}",
                            description=f"Wrong exception type for '{ec.name}'",
                        ))

    return cxs, checks


def search_property_violations(
    contract: BigIntContract,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property over the grid."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        grid: Sequence[BigInt] = contract.values
        if prop.arity == 3:
            grid = grid[:TERNARY_GRID_SIZE]
        for combo in itertools.product(grid, repeat=prop.arity):
            checks += 1
            try:
                ok = prop.check(*combo)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=tuple(_show(v) for v in combo),
                    expected=prop.description,
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Property '{prop.name}' raised",
                ))
                continue
            if not ok:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=tuple(_show(v) for v in combo),
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(contract: BigIntContract | None = None) -> SearchReport:
    """Run the complete counterexample search for one contract."""
    if contract is None:
        contract = build_contract()
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(contract)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    report = run_search()
    print(report.summary())
    if not report.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
