#!/usr/bin/env python3
from .app.application import run_application
from .windows import ProducerWindow


def main() -> None:
    """GUI entry point."""
    run_application(ProducerWindow)


if __name__ == "__main__":
    main()
