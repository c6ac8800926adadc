# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
errstamp: stable error codes for JavaScript error construction sites.

The pass lives under `errstamp.transform`; `errstamp.parser` and
`errstamp.printer` are the small front/back end used to run it over source
files. The CLI entrypoint is `errstamp.cli:main`.
"""

__all__ = []
