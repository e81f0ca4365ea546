"""opensdk module entry point.

Enables running the CLI via: python -m opensdk
"""

from opensdk.cli.main import cli_main

if __name__ == "__main__":
    cli_main()
