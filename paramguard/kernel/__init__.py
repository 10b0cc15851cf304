"""Kernel: request-time enforcement components."""
