"""Test helper modules for the promptsmith test suite.

- source_tree: SourceTree builder and the standard valid profile fixture data
"""
