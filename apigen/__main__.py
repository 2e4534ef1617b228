"""Entry point: python -m apigen

Reads or fetches an OpenAPI document and writes interfaces.ts, api.ts and
index.ts to the output directory.
"""

from .cli import main

if __name__ == "__main__":
    main()
