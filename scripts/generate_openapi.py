"""Print the OpenAPI schema of the receivables API as JSON.

Usage: python scripts/generate_openapi.py > openapi.json
"""

import json

from receivables.main import app

if __name__ == "__main__":
    print(json.dumps(app.openapi(), indent=2))
