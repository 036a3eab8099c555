"""
Root conftest.

tests/test_cli.py imports the top-level main.py. setup.cfg sets pytest's
pythonpath to the project root so that import works in every import mode.
"""
