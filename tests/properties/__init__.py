"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_distribution_properties: characteristic function invariants
    test_quadrature_properties: polynomial exactness and scale invariance
    test_option_properties: no-arbitrage and replication identities
"""
