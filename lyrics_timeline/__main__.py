"""Package entry point for ``python -m lyrics_timeline``.

Delegates to the CLI's main() function.
"""

from lyrics_timeline.cli import main

if __name__ == "__main__":
    main()
