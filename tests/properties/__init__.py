"""
Property-based testing using Hypothesis.

This package contains property tests that verify pricing invariants hold
across randomly generated paths, amounts and seeds.

Modules:
    test_pricing_invariants: payoff parity, cashflow arithmetic, engine reproducibility
"""
