"""Test package for quakegrid.

This package contains:
- Unit tests (test_geo.py, test_spatial_index.py, test_index_builder.py,
  test_clustering.py, test_summary.py, test_benchmark.py, test_config.py)
- Integration tests (test_integration.py)
- Test configuration (conftest.py)
"""
