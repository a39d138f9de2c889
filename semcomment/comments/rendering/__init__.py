"""Comment rendering for attribute documentation, transport-agnostic.

Contains:
- options: the validated, immutable comment format descriptor
- wrap: greedy codepoint-aware word re-flow
- renderer: pure brief + blocks -> comment string renderer
- formats: the read-only registry of comment formats by target name
- exporter: batch helpers and JSON loaders
"""
