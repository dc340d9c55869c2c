"""
sugarlint: a Swift linter that rewrites long-form standard containers
(`Array<T>`, `Dictionary<K, V>`, `Optional<T>`, `ImplicitlyUnwrappedOptional<T>`)
into their shorthand syntax.
"""

__version__ = "0.1.0"
