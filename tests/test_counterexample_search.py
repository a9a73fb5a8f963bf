"""Runs the counterexample search as part of the suite."""

from __future__ import annotations

import dataclasses

from bigint import BigInt
from contract import build_contract
from validation.counterexample_search import (
    Counterexample,
    SearchReport,
    run_search,
    search_error_condition_violations,
)


def _small_contract():
    contract = build_contract()
    return dataclasses.replace(
        contract,
        values=contract.values[:10] + tuple(v.negate() for v in contract.values[1:4]),
        shift_counts=(0, 1, 64, 65),
    )


class TestSearch:

    def test_no_counterexamples_on_small_grid(self):
        report = run_search(_small_contract())
        assert report.checks_run > 0
        assert report.passed, report.summary()

    def test_error_conditions_checked(self):
        cxs, checks = search_error_condition_violations(_small_contract())
        assert cxs == []
        assert checks > 0

    def test_broken_implementation_is_caught(self):
        contract = _small_contract()
        add = contract.operations["add"]
        broken = dataclasses.replace(add, invoke=lambda a, b: a.add(b).add(BigInt(1)))
        contract = dataclasses.replace(contract, operations={"add": broken})
        report = run_search(contract)
        assert not report.passed
        assert any(
            cx.category == "postcondition_violation" for cx in report.counterexamples
        )


class TestReport:

    def test_summary_passed(self):
        report = SearchReport(checks_run=3)
        assert "No counterexamples found" in report.summary()

    def test_summary_lists_counterexamples(self):
        report = SearchReport(
            counterexamples=[Counterexample(
                category="postcondition_violation",
                operation="add",
                inputs=("1", "2"),
                expected="3",
                actual="result=4",
                description="Postcondition 'result_correct' violated",
            )],
            checks_run=1,
        )
        assert not report.passed
        assert "Counterexamples found: 1" in report.summary()
        assert "result=4" in report.summary()
