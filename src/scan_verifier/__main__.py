"""Allow ``python -m scan_verifier``."""
from .cli import cli

cli()
