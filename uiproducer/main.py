import sys

from uiproducer.cli.application import run as cli_run

__all__ = ["run"]


def run():
    """
    Main entry point that handles both CLI and GUI modes.
    - When run with arguments, operates in CLI mode
    - When run without arguments, launches the GUI
    """
    if len(sys.argv) == 1:
        from uiproducer.gui.main import main as gui_main
        gui_main()
    else:
        cli_run()


if __name__ == "__main__":
    run()
