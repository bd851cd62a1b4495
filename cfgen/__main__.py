"""Entry point: python -m cfgen

Downloads the Cloudflare OpenAPI schema, patches it, generates the client.
"""

from .cli import main

if __name__ == "__main__":
    main()
