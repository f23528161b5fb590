"""Resolve sample IDs against a variant-file grid and run bcftools over them."""

__version__ = "0.1.0"
