"""Allow ``python -m headlines.cli`` execution."""

from headlines.cli.manage import main

main()
