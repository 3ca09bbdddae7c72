"""
jsfeatures: a verifiable catalog of JavaScript language features.

Every documented behavior (block scoping, destructuring, spread/rest,
template literals, arrow functions, asynchronous control flow, object
utilities and error handling) is a feature entry holding literal snippets
and the exact output, or the exact failure, each snippet produces.

The package is organised into a few modules:

* ``catalog`` – the data model, the YAML loader and the in-memory registry
  of feature entries.  The built-in entries ship as package data under
  ``jsfeatures/catalog/data``.
* ``verifier`` – runs every snippet with Node.js in its own process and
  scores the observed output against the documentation.
* ``reporter`` – renders verification results as text or JSON.
* ``cli`` – the ``jsfeatures`` command line interface.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
