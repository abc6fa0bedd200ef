"""Benchmarks for the audit hot path, using pytest-benchmark.

Run with::

    pytest tests/benchmarks/bench_record_builder.py tests/benchmarks/bench_dispatch.py -v
    pytest tests/benchmarks/bench_dispatch.py --benchmark-sort=median

To run as plain functional tests::

    pytest tests/benchmarks/bench_dispatch.py --benchmark-disable
"""
