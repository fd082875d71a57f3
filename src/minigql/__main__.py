"""Allow ``python -m minigql``."""

from minigql.app import main

main()
