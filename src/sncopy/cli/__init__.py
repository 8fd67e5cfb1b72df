"""sncopy CLI: stage versioned trees from a slow share to local disk."""

from ._helpers import main  # noqa: F401

# Import command modules to register Click commands with the main group.
from . import _copy, _versions  # noqa: F401
