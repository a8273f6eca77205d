"""
Fulcrum CLI - diagnostics for routing and controller dispatch.

Usage:
    fulcrum resolve /blog/show/id/42
    fulcrum check blog show --instantiate
    fulcrum dispatch /blog/show/id/42
"""

__version__ = "0.3.0"
__cli_name__ = "fulcrum"


def main():
    """Wrapper to avoid eager import of __main__ which causes warnings with -m."""
    from .__main__ import main as _main
    return _main()
