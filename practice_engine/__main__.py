"""Allow ``python -m practice_engine``."""

from practice_engine.cli import main

if __name__ == "__main__":
    main()
