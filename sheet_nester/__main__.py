# sheet_nester/__main__.py
# Package entrypoint so you can run:
#   python -m sheet_nester --help
#
# Examples:
#   python -m sheet_nester --job job.json
#   python -m sheet_nester --job job.json --out out/ --png layout.png --kerf 4

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
