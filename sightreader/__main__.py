"""Entry point wrapper for ``python -m sightreader``.

Execution is forwarded to :func:`sightreader.main` so ``python -m
sightreader`` and the installed ``sight-reader`` console script behave
identically.

Example
-------
::

    python -m sightreader --measures 8 --key Am --timesig 3/4 \
        --difficulty advanced --seed 7
"""

from . import main

if __name__ == "__main__":
    main()
