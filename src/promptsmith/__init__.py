"""
promptsmith - profile-based document composition

promptsmith compiles agent and skill documents from small, independently
authored text fragments according to a per-profile YAML manifest.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
