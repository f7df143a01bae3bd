#!/usr/bin/env python3
"""
Front-End Throughput Test Suite
===============================

Benchmarks lexing and parsing of generated Kolang programs and checks that
both stay linear in the size of the input.

Features:
- pytest-benchmark timings for the lexer and the full front end
- Scaling check across program sizes
- Error-heavy input does not fall off a performance cliff
"""

import os
import sys
import time
from dataclasses import dataclass

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from kolang import parse_string, tokenize_string


FUNCTION_TEMPLATE = """
fn compute_{index}(xs: int[], n: int): int {{
    let total: int = 0;
    let scale: float = 1.5e{exp};
    for i = 0 to n - 1 {{
        if xs[i] % 2 == 0 and not (xs[i] < 0) {{
            total = total + xs[i] * {index};
        }} else {{
            total = total - 0x{index:X};
        }}
    }}
    while total > 1000 total = total / 2;  // clamp
    return total;
}}
"""


def generate_program(functions: int) -> str:
    return "".join(FUNCTION_TEMPLATE.format(index=i, exp=i % 5) for i in range(functions))


def generate_broken_program(functions: int) -> str:
    """Every function has a syntax error that needs recovery."""
    broken = "fn broken_{0}(a: int) {{ let x: int = ; if ( {{ y = ; }} return a }}\n"
    return "".join(broken.format(i) for i in range(functions))


@dataclass
class ScalingCase:
    """Program size and the slack allowed over a linear slowdown"""
    functions: int
    slack: float


class TestFrontendThroughput:
    """
    Benchmarks for the lexer and the parser.
    """

    SMALL = generate_program(50)

    def test_lexer_benchmark(self, benchmark):
        tokens = benchmark(tokenize_string, self.SMALL)
        assert tokens[-1].lexeme == ""
        assert len(tokens) > 50 * 80

    def test_parser_benchmark(self, benchmark):
        result = benchmark(parse_string, self.SMALL)
        assert result.ok
        assert len(result.program.functions) == 50

    def test_recovery_benchmark(self, benchmark):
        result = benchmark(parse_string, generate_broken_program(50))
        assert result.has_errors()
        assert len(result.program.functions) == 50

    @pytest.mark.parametrize("case", [
        ScalingCase(100, 3.0),
        ScalingCase(400, 3.0),
    ])
    def test_linear_scaling(self, case: ScalingCase):
        """Parsing time grows roughly linearly with program size"""
        baseline_source = generate_program(25)
        source = generate_program(case.functions)

        def best_of(text, runs=3):
            times = []
            for _ in range(runs):
                start_time = time.perf_counter()
                parse_string(text)
                times.append(time.perf_counter() - start_time)
            return min(times)

        baseline = best_of(baseline_source)
        measured = best_of(source)
        expected_ratio = case.functions / 25

        assert measured < baseline * expected_ratio * case.slack, \
            f"{case.functions} functions took {measured * 1000:.1f}ms, " \
            f"baseline {baseline * 1000:.1f}ms for 25"
