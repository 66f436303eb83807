"""Main function for skeletal_tau."""

from skeletal_tau.core import cli


def run_main() -> None:
    """Main entry point to skeletal_tau."""
    cli.main()


if __name__ == "__main__":
    run_main()
