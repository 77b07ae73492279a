"""Module entrypoint for `python -m ghtools`.

Forwards to the `github_api` command.

Usage:
    ```bash
    python -m ghtools /rate_limit
    python -m ghtools -X DELETE /repos/octo/scratch
    ```
"""

from .cli.api import main

if __name__ == "__main__":
    raise SystemExit(main())
