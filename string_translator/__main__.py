"""
Main entry point for running as module: python -m string_translator
"""
from string_translator.cli.cli_interface import cli

if __name__ == '__main__':
    cli()
