"""Entry point for ``python -m shellwrapper``.

Usage:
    python -m shellwrapper "cd /tmp" "pwd"
    printf 'export X=1\necho $X\n' | python -m shellwrapper --shell sh
"""

import sys

from shellwrapper.cli import main

if __name__ == "__main__":
    sys.exit(main())
