"""
Catalogue definitions sub-package for lab-msg-decode.

Contains YAML files that map each format's segment codes and field
numbers to human-readable names. The loader module
(catalogue_registry.py in the parent package) reads these files at
runtime.
"""
