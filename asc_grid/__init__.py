"""
ASC grid core package.

The parsing subsystem reads Arc/Info ASCII Grid files into immutable
`Grid` records and offers a single-flight background cache so a
poll-driven host can start a parse, keep working, and pick up the
finished result later without parsing the same request twice.
"""
