"""Operating-systems teaching toolkit: batch machines, deadlock, scheduling and synchronisation."""

__version__ = "0.1.0"

__all__ = ["deadlock", "phase1", "phase2", "scheduling", "sync"]