"""npm-age-gate core package.

Blocks installs of npm packages whose resolved version was published more
recently than a configurable minimum age. The validation engine is usable on
its own; the command line in ``npm_age_gate.cli`` wraps it around the real
package manager.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "validator",
]
