# Path: artifact_fetcher/__init__.py
"""
Artifact Fetcher

Provisions prebuilt native binaries for a fixed platform matrix.
Each binary is published as one entry inside a remote .tar.gz;
the fetcher streams, gunzips and demultiplexes every archive
concurrently and writes the wanted entry to a deterministic path.
"""

__version__ = '0.1.0'
