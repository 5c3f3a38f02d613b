#!/usr/bin/env python3
"""
DeviceDB - Entry point script

Run the REPL:
    python -m devicedb

Or use as a library:
    from devicedb import Database
    db = Database(order=3)
    db.execute("INSERT (1, '10.0.0.1', '/floor1/lamp')")
"""

import sys

from devicedb.core.repl import main

if __name__ == '__main__':
    sys.exit(main())
