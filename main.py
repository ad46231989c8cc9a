try:
    from nodesource.cli.app import cli
except ModuleNotFoundError:
    # Fallback: ensure project root is on sys.path when run from a checkout
    import os
    import sys

    sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
    from nodesource.cli.app import cli


def main():
    """Checkout entry point. Delegates to nodesource.cli.app:cli."""
    cli()


if __name__ == "__main__":
    main()
