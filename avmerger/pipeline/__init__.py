"""
This package contains the batch pipeline of AV Merger.

A pipeline discovers the work in a directory, runs one task per unit of work
with bounded concurrency, and collects the per-task errors.
"""
