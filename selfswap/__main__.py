from __future__ import annotations

from selfswap.services.update.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
