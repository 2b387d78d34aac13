"""Allow running as ``python -m calcscript``."""

from calcscript.cli import main

if __name__ == "__main__":
    main()
