"""Allow ``python -m patterngen``."""

from patterngen.cli import main

if __name__ == "__main__":
    main()
